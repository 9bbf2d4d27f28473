import asyncio
import logging
import threading
import time
from typing import List, Dict

import httpx
import requests
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config import (
    LLM_BACKEND,
    MOCK_LLM,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    ENABLE_GROUNDING,
    LOCAL_LLM_API_KEY,
    LOCAL_LLM_BASE_URL,
    LOCAL_LLM_MODEL,
    LLM_TEMPERATURE,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT,
)
from errors import TransportError
from parsing import extract_sources
from schemas import LLMResponse

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "La IA tardó demasiado en responder. Inténtalo de nuevo."
INVALID_REPLY_MESSAGE = "La IA devolvió una respuesta inválida."
EMPTY_REPLY_MESSAGE = "La IA no devolvió ningún texto."
TRUNCATED_REPLY_MESSAGE = (
    "La respuesta de la IA se cortó antes de terminar ({reason}). "
    "Inténtalo de nuevo."
)

# =========================================================
# LOCAL SERVER LOCK
# A local GGUF server handles one completion at a time
# =========================================================
LOCAL_LLM_LOCK = threading.Lock()

# =========================================================
# GEMINI CLIENT (lazy-loaded)
# =========================================================
_gemini = None


def _gemini_client() -> genai.Client:
    global _gemini
    if _gemini is None:
        _gemini = genai.Client(
            api_key=GEMINI_API_KEY,
            http_options=types.HttpOptions(timeout=LLM_TIMEOUT * 1000),
        )
    return _gemini


MOCK_REPLY = """### Palabra a estudiar:
**猫** (neko, ねこ): gato.

---

### Significado y Contextos de Uso:
**猫** significa "gato". Se usa para hablar de mascotas y en muchas expresiones.
> **¡Dato Curioso!** El maneki-neko saluda con la pata para atraer la buena suerte.

---

### Ejemplos Simples para Practicar:
* 猫が好きです。
* Neko ga suki desu.
* Me gustan los gatos.

* 猫が寝ています。
* Neko ga nete imasu.
* El gato está durmiendo.

* 黒い猫を見ました。
* Kuroi neko o mimashita.
* Vi un gato negro.

---

### Desglose de Kanjis:
* **Kanji 1: 猫** (ねこ / びょう)
* **Significado:** gato
* **Otras palabras con 猫:** 子猫 (koneko, gatito), 猫舌 (nekojita, sensible al calor)
--- PROMPTS ---
PROMPT: A person smiling at a cat, with the labels "猫", "ねこ" and "gato" clearly visible.
PROMPT: An educational infographic breaking down the kanji "猫" (ねこ, gato), labels in Spanish such as "Componentes".
PROMPT: A black cat sleeping on a windowsill, with "猫", "ねこ" and "gato" written on a sign.
"""


def _error_message(resp: requests.Response) -> str:
    """Best-effort message from an OpenAI-style error payload."""
    try:
        data = resp.json()
    except ValueError:
        return ""
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict):
        return str(err.get("message") or "")
    if isinstance(err, str):
        return err
    return ""


# =========================================================
# GEMINI (google-genai SDK)
# =========================================================
def _gemini_config() -> types.GenerateContentConfig:
    options = {"temperature": LLM_TEMPERATURE}
    # 0 = no cap; thinking tokens count toward the cap on 2.5 models
    if LLM_MAX_TOKENS > 0:
        options["max_output_tokens"] = LLM_MAX_TOKENS
    if ENABLE_GROUNDING:
        options["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    return types.GenerateContentConfig(**options)


def _gemini_generate(prompt: str) -> LLMResponse:
    logger.info("[LLM] Sending request to Gemini model %s", GEMINI_MODEL)
    start = time.time()

    try:
        response = _gemini_client().models.generate_content(
            model=GEMINI_MODEL,
            contents=prompt,
            config=_gemini_config(),
        )
    except genai_errors.APIError as e:
        logger.error("[LLM] Gemini API error %s: %s", e.code, e.message)
        raise TransportError(e.message or str(e)) from e
    except httpx.TimeoutException as e:
        logger.error("[LLM] Timeout after %ss", LLM_TIMEOUT)
        raise TransportError(TIMEOUT_MESSAGE) from e
    except httpx.HTTPError as e:
        logger.error("[LLM] Request failed: %s", e)
        raise TransportError(str(e)) from e

    elapsed = round(time.time() - start, 2)
    logger.info("[LLM] Response received in %s seconds", elapsed)

    if not response.candidates:
        feedback = response.prompt_feedback
        reason = getattr(feedback.block_reason, "value", feedback.block_reason) if feedback else None
        logger.warning("[LLM] No candidates (block_reason=%s)", reason)
        raise TransportError(
            f"La IA no devolvió ningún resultado ({reason})." if reason else ""
        )

    candidate = response.candidates[0]
    finish_reason = candidate.finish_reason
    reason_name = getattr(finish_reason, "value", finish_reason)
    if finish_reason is not None and finish_reason != types.FinishReason.STOP:
        logger.warning("[LLM] Generation stopped early (finish_reason=%s)", reason_name)
        raise TransportError(TRUNCATED_REPLY_MESSAGE.format(reason=reason_name))

    text = response.text
    if not text or not text.strip():
        logger.warning("[LLM] Empty reply from Gemini")
        raise TransportError(EMPTY_REPLY_MESSAGE)

    return LLMResponse(text=text, sources=extract_sources(candidate.grounding_metadata))


# =========================================================
# OPENAI-COMPATIBLE CHAT CALL
# =========================================================
def _api_chat(messages: List[Dict[str, str]]) -> LLMResponse:
    """
    Call an OpenAI-compatible server (SERIALIZED).
    """
    url = f"{LOCAL_LLM_BASE_URL.rstrip('/')}/v1/chat/completions"

    headers = {
        "Authorization": f"Bearer {LOCAL_LLM_API_KEY}",
        "Content-Type": "application/json",
    }

    payload = {
        "model": LOCAL_LLM_MODEL,
        "messages": messages,
        "temperature": LLM_TEMPERATURE,
    }
    if LLM_MAX_TOKENS > 0:
        payload["max_tokens"] = LLM_MAX_TOKENS

    logger.debug("[LLM] Waiting for lock...")
    with LOCAL_LLM_LOCK:
        logger.info("[LLM] Sending request to %s", url)
        start = time.time()

        try:
            resp = requests.post(url, json=payload, headers=headers, timeout=LLM_TIMEOUT)
        except requests.exceptions.Timeout as e:
            logger.error("[LLM] Timeout after %ss", LLM_TIMEOUT)
            raise TransportError(TIMEOUT_MESSAGE) from e
        except requests.exceptions.RequestException as e:
            logger.error("[LLM] Request failed: %s", e)
            raise TransportError(str(e)) from e

        elapsed = round(time.time() - start, 2)
        logger.info("[LLM] Response %s received in %s seconds", resp.status_code, elapsed)

    if not resp.ok:
        raise TransportError(_error_message(resp))

    try:
        choice = resp.json()["choices"][0]
        text = choice["message"]["content"]
    except ValueError as e:
        logger.error("[LLM] Invalid JSON body: %s", resp.text[:200])
        raise TransportError(INVALID_REPLY_MESSAGE) from e
    except (KeyError, IndexError, TypeError) as e:
        logger.error("[LLM] Unexpected payload: %s", resp.text[:200])
        raise TransportError(INVALID_REPLY_MESSAGE) from e

    finish_reason = choice.get("finish_reason")
    if finish_reason not in (None, "stop"):
        logger.warning("[LLM] Generation stopped early (finish_reason=%s)", finish_reason)
        raise TransportError(TRUNCATED_REPLY_MESSAGE.format(reason=finish_reason))

    if not text or not text.strip():
        raise TransportError(EMPTY_REPLY_MESSAGE)

    return LLMResponse(text=text)


# =========================================================
# PUBLIC GENERATION ENTRY POINTS
# =========================================================
def generate(prompt: str) -> LLMResponse:
    """
    Send one prompt to the configured backend and wait for the full reply.

    Raises:
        TransportError: on any network, HTTP or payload failure, and when
            the reply was cut short or came back empty
    """
    if MOCK_LLM:
        logger.info("[LLM] Mock backend, returning canned lesson")
        return LLMResponse(text=MOCK_REPLY)

    if LLM_BACKEND == "api":
        return _api_chat([{"role": "user", "content": prompt.strip()}])

    return _gemini_generate(prompt)


async def agenerate(prompt: str) -> LLMResponse:
    """Async wrapper; the blocking call runs in a worker thread."""
    return await asyncio.to_thread(generate, prompt)
