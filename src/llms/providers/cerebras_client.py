from __future__ import annotations

import os
from typing import Dict, List, Optional
from cerebras.cloud.sdk import Cerebras


class CerebrasLLM:
    """
    Wrapper around Cerebras Cloud SDK.
    """
    def __init__(self, api_key: Optional[str] = None, timeout_s: Optional[float] = None):
        self.api_key = api_key or os.environ.get("CEREBRAS_API_KEY")
        # retries are owned by CerebrasGenerator
        if timeout_s is None:
            self.client = Cerebras(api_key=self.api_key, max_retries=0)
        else:
            self.client = Cerebras(api_key=self.api_key, timeout=timeout_s, max_retries=0)

    def chat(
        self,
        *,
        model: str = "llama-3.3-70b",
        messages: List[Dict[str, str]],
        temperature: float = 1.0,
        max_completion_tokens: int = 8192,
    ) -> str:
        """
        Non-streaming chat completion. SDK errors propagate to the caller.
        """
        resp = self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_completion_tokens=max_completion_tokens,
            stream=False,
        )
        return resp.choices[0].message.content or ""
