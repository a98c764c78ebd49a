"""Exception hierarchy for the enrichment pipeline."""


class ProfWordsError(Exception):
    """Base class for all errors raised by profwords."""

    pass


class ValidationError(ProfWordsError):
    """Raised when caller input is unusable. Maps to HTTP 400."""

    pass


class InvalidRequest(ValidationError):
    """Raised when the word or profession list is empty."""

    pass


class InvalidProfession(ValidationError):
    """Raised when a profession is missing or has an empty id."""

    pass


class InvalidWord(ValidationError):
    """Raised when a word has no term."""

    pass


class InvalidWords(ValidationError):
    """Raised when the word collection is not a list."""

    pass


class EmptyWordSet(ValidationError):
    """Raised when no usable words remain to build a prompt from."""

    pass


class EmptyResponse(ValidationError):
    """Raised when merge is handed an empty model response."""

    pass


class UpstreamGenerationError(ProfWordsError):
    """Raised when the generative service cannot produce a completion."""

    pass


class GenerationFailed(UpstreamGenerationError):
    """Raised when the chat completion call fails."""

    pass


class GenerationTimeout(GenerationFailed):
    """Raised when the chat completion call exceeds its timeout."""

    pass


class EmptyCompletion(UpstreamGenerationError):
    """Raised when the service answers without any content."""

    pass


class MalformedResponseError(ProfWordsError):
    """Raised when a completion is not the JSON shape that was asked for."""

    pass


class MalformedResponse(MalformedResponseError):
    """Raised when a completion is unparsable or lacks the expected key."""

    pass


class InternalError(ProfWordsError):
    """Raised for unexpected failures. Details stay in server logs."""

    pass


class DictionaryError(ProfWordsError):
    """Raised when a dictionary cannot be served."""

    pass


class UnknownExamType(DictionaryError, ValidationError):
    """Raised when the exam type is missing or not supported."""

    pass


class DictionaryNotFound(DictionaryError):
    """Raised when the dictionary file does not exist."""

    pass


class DictionaryReadError(DictionaryError):
    """Raised when the dictionary file cannot be read or parsed."""

    pass
