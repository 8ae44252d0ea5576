from __future__ import annotations

import httpx

# Telegram rejects sendMessage text longer than this.
_MAX_MESSAGE_CHARS = 4096


class TelegramNotifier:
    """Order and failure notices for the bridge operator; disabled without token or chat id."""

    def __init__(
        self,
        *,
        bot_token: str,
        chat_id: str,
        prefix: str = "",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._bot_token = bot_token.strip()
        self._chat_id = chat_id.strip()
        self._prefix = prefix.strip()
        self._client = httpx.AsyncClient(
            base_url="https://api.telegram.org",
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    def enabled(self) -> bool:
        return bool(self._bot_token and self._chat_id)

    async def aclose(self) -> None:
        await self._client.aclose()

    def render(self, text: str) -> str:
        message = f"{self._prefix} {text}" if self._prefix else text
        return message[:_MAX_MESSAGE_CHARS]

    async def send(self, text: str) -> None:
        if not self.enabled():
            return
        payload = {
            "chat_id": self._chat_id,
            "text": self.render(text),
            "disable_web_page_preview": True,
        }
        resp = await self._client.post(f"/bot{self._bot_token}/sendMessage", json=payload)
        resp.raise_for_status()
