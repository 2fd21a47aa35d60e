# utils/delivery.py
import logging
import random
import time

import requests

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    def __init__(self, destination, message):
        super().__init__(f"Delivery to {destination} failed: {message}")
        self.destination = destination


class TelegramSender:
    """Posts Markdown messages through the Telegram Bot API with retry and backoff."""

    def __init__(self, token, api_url='https://api.telegram.org', max_retries=3, base_delay=2,
                 timeout=10, session=None, sleep=time.sleep):
        if not token:
            raise ValueError("A bot token is required to deliver messages")
        self.url = f"{api_url.rstrip('/')}/bot{token}/sendMessage"
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sleep = sleep

    @classmethod
    def from_config(cls, config):
        return cls(
            config.TELEGRAM_BOT_TOKEN,
            api_url=config.TELEGRAM_API_URL,
            max_retries=config.DELIVERY_MAX_RETRIES,
            base_delay=config.DELIVERY_BASE_DELAY,
        )

    def _backoff(self, retry_count, retry_after=None):
        # exponential backoff with jitter
        delay = self.base_delay * (2 ** retry_count) + random.uniform(0, self.base_delay)
        if retry_after:
            delay = max(delay, float(retry_after))
        return delay

    def send_message(self, destination, text):
        payload = {"chat_id": destination, "text": text, "parse_mode": "Markdown"}
        retry_count = 0

        while True:
            retry_after = None
            try:
                response = self.session.post(self.url, json=payload, timeout=self.timeout)
            except requests.RequestException as e:
                error_message = str(e)
                should_retry = True
            else:
                if response.status_code == 200:
                    return response.json()

                should_retry = response.status_code == 429 or response.status_code >= 500
                error_message = f"HTTP {response.status_code}"
                try:
                    error_json = response.json()
                    error_message = error_json.get("description", error_message)
                    retry_after = (error_json.get("parameters") or {}).get("retry_after")
                except ValueError:
                    pass

            if not should_retry or retry_count >= self.max_retries:
                raise DeliveryError(destination, error_message)

            retry_count += 1
            delay = self._backoff(retry_count, retry_after)
            logger.warning(
                f"Send to {destination} failed ({error_message}); "
                f"retrying in {delay:.2f} seconds (attempt {retry_count}/{self.max_retries})"
            )
            self.sleep(delay)
