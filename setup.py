from setuptools import setup, find_namespace_packages

setup(
    name="feedqa",
    version="0.1.0",
    description="Feed reader that answers questions about RSS and Atom articles",
    packages=find_namespace_packages(include=["feedqa", "feedqa.*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "async-timeout>=4.0.0",
        "beautifulsoup4>=4.11.0",
        "transformers>=4.30.0",
        "huggingface-hub>=0.26.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "torch": ["torch>=2.0"],
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "feedqa=feedqa.cli:main",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
