import logging

from pydantic import ValidationError

from errors import (
    EmptyLessonError,
    InputValidationError,
    LessonError,
    LessonParseError,
    TransportError,
    UNKNOWN_ERROR_MESSAGE,
)
from llm import agenerate
from parsing import parse_prompts, split_response
from prompts import build_lesson_prompt
from schemas import LessonRequest, ParsedLesson
from state import Failed, LessonSession, Rejected, Started, Succeeded, UIState

logger = logging.getLogger(__name__)


def validate_word(word) -> LessonRequest:
    try:
        return LessonRequest(word=word)
    except ValidationError as e:
        raise InputValidationError() from e


# =========================================================
# LESSON GENERATION (one request, one reply)
# =========================================================
async def generate_lesson(word: str) -> ParsedLesson:
    """
    Ask the text service for a lesson about ``word`` and parse the reply.

    Either the full lesson/prompts/sources triple is returned or an error
    is raised; there is no partial result.

    Raises:
        InputValidationError: blank word (no request is sent)
        TransportError: the text service call failed
        SeparatorNotFoundError: the reply has no prompts section
        EmptyLessonError: the reply has a prompts section but no lesson
    """
    req = validate_word(word)

    response = await agenerate(build_lesson_prompt(req.word))

    lesson, prompts_block = split_response(response.text)
    if not lesson:
        raise EmptyLessonError(response.text)

    prompts = parse_prompts(prompts_block)
    if len(prompts) != 3:
        logger.info("Reply for %r has %d prompts (expected 3)", req.word, len(prompts))

    return ParsedLesson(lesson=lesson, prompts=prompts, sources=response.sources)


def _error_code(err: LessonError) -> str:
    if isinstance(err, InputValidationError):
        return "validation"
    if isinstance(err, LessonParseError):
        return "parse"
    if isinstance(err, TransportError):
        return "transport"
    return "unknown"


class LessonOrchestrator:
    """
    Drives a ``LessonSession`` through one generation per call.

    All failures end in the ERROR phase with a single display message;
    nothing is retried.
    """

    def __init__(self, session: LessonSession):
        self.session = session

    async def generate(self, word) -> UIState:
        request_id = self.session.issue_request_id()

        try:
            req = validate_word(word)
        except InputValidationError as e:
            logger.info("Rejected blank word (request %d)", request_id)
            return self.session.dispatch(Rejected(request_id, e.message))

        logger.info("Generating lesson for %r (request %d)", req.word, request_id)
        self.session.dispatch(Started(request_id, req.word))

        try:
            result = await generate_lesson(req.word)
        except LessonParseError as e:
            logger.warning("Unparseable reply for %r: %s", req.word, e.raw[:200])
            state = self.session.dispatch(Failed(request_id, e.message, _error_code(e)))
        except LessonError as e:
            logger.warning("Lesson generation failed for %r: %s", req.word, e.message)
            state = self.session.dispatch(Failed(request_id, e.message, _error_code(e)))
        except Exception:
            logger.exception("Unexpected error generating lesson for %r", req.word)
            state = self.session.dispatch(Failed(request_id, UNKNOWN_ERROR_MESSAGE))
        else:
            state = self.session.dispatch(Succeeded(request_id, result))

        if state.request_id != request_id:
            logger.info("Request %d superseded by %d", request_id, state.request_id)

        return state
