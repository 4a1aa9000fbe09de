from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from openai import OpenAI

from config.llm_routes import ROUTES
from config.settings import Settings, get_settings
from utils.llm_logger import log_call, sha256_text


class LLMClient:
    """Minimal wrapper to centralize per-use-case routing, retries and logging."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[OpenAI] = None) -> None:
        self.settings = settings or get_settings()
        if client is None and not self.settings.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY required for text generation")
        self._client = client
        self.max_attempts = max(1, self.settings.max_retries)
        self.backoff_ms = 300

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.llm_timeout_seconds,
            )
        return self._client

    def chat(
        self,
        *,
        use_case: str,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        prompt_name: Optional[str] = None,
        prompt_text: Optional[str] = None,
    ) -> Any:
        route = ROUTES.get(use_case, {})
        provider = route.get("provider", "openai")
        model = route.get("model") or self.settings.openai_model
        op = route.get("operation", "chat")
        temp = temperature if temperature is not None else route.get("temperature")

        if provider != "openai":
            raise NotImplementedError(f"Provider not implemented: {provider}")

        kwargs: Dict[str, Any] = {"model": model, "messages": messages}
        # Only pass temperature if explicitly provided (some models only accept default)
        if temp is not None:
            kwargs["temperature"] = temp
        if route.get("json"):
            kwargs["response_format"] = {"type": "json_object"}

        last_exc: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            t0 = time.time()
            try:
                resp = self.client.chat.completions.create(**kwargs)
            except Exception as e:
                last_exc = e
                log_call(
                    caller=f"llm_client.chat:{use_case}",
                    provider=provider,
                    model=model,
                    operation=op,
                    prompt_name=prompt_name,
                    prompt_hash=sha256_text(prompt_text),
                    duration_ms=int((time.time() - t0) * 1000),
                    status="error",
                    error=str(e),
                    extras={"attempt": attempt},
                )
                if attempt < self.max_attempts:
                    time.sleep(self.backoff_ms / 1000.0)
                continue

            usage = getattr(resp, "usage", None)
            usage_obj = None
            if usage:
                usage_obj = {
                    "prompt_tokens": getattr(usage, "prompt_tokens", None),
                    "completion_tokens": getattr(usage, "completion_tokens", None),
                    "total_tokens": getattr(usage, "total_tokens", None),
                }
            log_call(
                caller=f"llm_client.chat:{use_case}",
                provider=provider,
                model=model,
                operation=op,
                prompt_name=prompt_name,
                prompt_hash=sha256_text(prompt_text),
                duration_ms=int((time.time() - t0) * 1000),
                status="ok",
                usage=usage_obj,
            )
            return resp

        assert last_exc is not None
        raise last_exc

    def generate(
        self,
        *,
        use_case: str,
        prompt: str,
        system_prompt: Optional[str] = None,
        prompt_name: Optional[str] = None,
    ) -> str:
        """Single-turn completion returning the message text ('' when empty)."""
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        resp = self.chat(
            use_case=use_case,
            messages=messages,
            prompt_name=prompt_name or use_case,
            prompt_text=(system_prompt or "") + prompt,
        )
        if not getattr(resp, "choices", None):
            return ""
        return resp.choices[0].message.content or ""
