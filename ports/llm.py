from __future__ import annotations

from typing import Optional, Protocol


class TextGenerationPort(Protocol):
    """Prompt in, text out. Expected (not guaranteed) to honor a requested JSON shape."""

    def generate(
        self,
        *,
        use_case: str,
        prompt: str,
        system_prompt: Optional[str] = None,
        prompt_name: Optional[str] = None,
    ) -> str:
        ...
