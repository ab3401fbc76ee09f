"""
Question-answering session for feedqa.

An :class:`InferenceSession` owns one extractive question-answering model.
The model is loaded once through a loader coroutine and then answers
questions against a bounded article context.
"""
import asyncio
import enum
import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Iterator, Mapping, Optional

from huggingface_hub.errors import LocalEntryNotFoundError

from feedqa.config import get_config
from feedqa.core.errors import (
    InitializationFailure,
    ModelLoadError,
    NetworkFailure,
    NotReady,
    QueryFailed,
    UnsupportedRuntime,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "distilbert-base-cased-distilled-squad"
MAX_CONTEXT_CHARS = 2000
ELLIPSIS = "..."

QuestionAnswerer = Callable[[str, str], Awaitable[Mapping[str, Any]]]
Loader = Callable[[str], Awaitable[QuestionAnswerer]]

_NETWORK_ERRORS = (ConnectionError, TimeoutError, LocalEntryNotFoundError)
_RUNTIME_ERRORS = (ImportError,)

# Compatibility shim for loaders that only report failures as text
_NETWORK_HINTS = ("fetch", "connect", "download", "network")
_RUNTIME_HINTS = (
    "webgpu",
    "mps backend",
    "torch not compiled with cuda",
    "no cuda gpus are available",
    "found no nvidia driver",
    "requires the pytorch library",
    "requires the tensorflow library",
    "at least one of tensorflow 2.0 or pytorch",
)


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


async def load_pipeline(model_name: str, device: Optional[Any] = None) -> QuestionAnswerer:
    """
    Load a HuggingFace question-answering pipeline.

    Building the pipeline and running inference are blocking calls, so both
    run in the loop's default executor.

    Args:
        model_name: Model id on the HuggingFace hub or a local path
        device: Device passed to ``transformers.pipeline`` (None for default)

    Returns:
        Coroutine function answering ``(question, context)``
    """
    from transformers import pipeline as hf_pipeline

    loop = asyncio.get_running_loop()
    if device is None:
        device = get_config('model.device')
    kwargs = {"model": model_name}
    if device is not None:
        kwargs["device"] = device

    logger.info(f"Loading question-answering model: {model_name}")
    qa = await loop.run_in_executor(
        None, functools.partial(hf_pipeline, "question-answering", **kwargs)
    )

    async def answer(question: str, context: str) -> Mapping[str, Any]:
        return await loop.run_in_executor(
            None, functools.partial(qa, question=question, context=context)
        )

    return answer


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    seen = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        yield error
        error = error.__cause__ or error.__context__


def classify_load_error(error: BaseException) -> ModelLoadError:
    """
    Map a model loading failure to NetworkFailure, UnsupportedRuntime or
    InitializationFailure.

    Exception types are checked first along the whole cause chain. Errors
    that carry no useful type are classified by their message.
    """
    chain = list(_error_chain(error))
    for exc in chain:
        if isinstance(exc, _NETWORK_ERRORS):
            return NetworkFailure(
                "Network error: Failed to download AI model. Please check your internet connection."
            )
        if isinstance(exc, _RUNTIME_ERRORS):
            return UnsupportedRuntime(
                f"Required runtime not available: {exc}"
            )

    message = " ".join(str(exc) for exc in chain).lower()
    if any(hint in message for hint in _NETWORK_HINTS):
        return NetworkFailure(
            "Network error: Failed to download AI model. Please check your internet connection."
        )
    if any(hint in message for hint in _RUNTIME_HINTS):
        return UnsupportedRuntime(
            f"Requested runtime is not supported on this machine: {error}"
        )
    return InitializationFailure(f"AI model initialization failed: {error}")


def truncate_context(context: str, limit: int = MAX_CONTEXT_CHARS) -> str:
    if len(context) > limit:
        return context[:limit] + ELLIPSIS
    return context


def format_answer(answer: str, score: float) -> str:
    return f"{answer}\n\n(Confidence: {score * 100:.1f}%)"


class InferenceSession:
    """
    Lifecycle of one question-answering model.

    UNINITIALIZED -> LOADING -> READY | FAILED. READY and FAILED are final;
    to recover from FAILED create a new session.
    """
    def __init__(
        self,
        model_name: Optional[str] = None,
        loader: Optional[Loader] = None,
        max_context_chars: Optional[int] = None,
    ):
        self.model_name = model_name or get_config('model.name', DEFAULT_MODEL)
        self.max_context_chars = max_context_chars or get_config('model.max_context_chars', MAX_CONTEXT_CHARS)
        self._loader = loader or load_pipeline
        self._qa: Optional[QuestionAnswerer] = None
        self.state = SessionState.UNINITIALIZED
        self.failure: Optional[ModelLoadError] = None

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.LOADING

    @property
    def is_ready(self) -> bool:
        return self.state is SessionState.READY

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "is_ready": self.is_ready,
            "is_loading": self.is_loading,
            "model_name": self.model_name,
        }

    async def initialize(self) -> None:
        """
        Load the model.

        Returns immediately when the model is ready or already loading, so a
        concurrent second call never starts a second load. A cancelled load
        leaves the session FAILED.

        Raises:
            NetworkFailure: The model could not be downloaded
            UnsupportedRuntime: The tensor runtime is missing or unsupported
            InitializationFailure: Any other load failure
        """
        if self.state is SessionState.READY:
            logger.debug("AI model already initialized")
            return
        if self.state is SessionState.LOADING:
            logger.debug("AI model is already loading")
            return
        if self.state is SessionState.FAILED:
            raise self.failure

        self.state = SessionState.LOADING
        try:
            self._qa = await self._loader(self.model_name)
        except asyncio.CancelledError:
            self.failure = InitializationFailure("AI model initialization was cancelled")
            self.state = SessionState.FAILED
            logger.warning(f"Loading AI model {self.model_name} was cancelled")
            raise
        except Exception as e:
            self.failure = classify_load_error(e)
            self.state = SessionState.FAILED
            logger.error(f"Failed to load AI model {self.model_name}: {e}")
            raise self.failure from e

        self.state = SessionState.READY
        logger.info(f"AI model {self.model_name} loaded")

    async def ask_question(self, context: str, question: str) -> str:
        """
        Answer ``question`` from ``context``.

        Args:
            context: Plain-text passage, truncated to ``max_context_chars``
            question: Natural-language question

        Returns:
            The answer followed by the model's confidence as a percentage

        Raises:
            NotReady: The model is not loaded
            QueryFailed: The model failed to answer
        """
        if not self.is_ready:
            raise NotReady("AI model not initialized. Please wait for initialization to complete.")

        truncated = truncate_context(context, self.max_context_chars)
        logger.debug(f"Processing question: {question}")
        try:
            result = await self._qa(question, truncated)
            return format_answer(result["answer"], float(result["score"]))
        except Exception as e:
            raise QueryFailed(f"Failed to get answer: {e}") from e
