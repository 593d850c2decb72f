"""
Custom prompt and log sink - drive the second factor without a terminal
"""
import asyncio
import logging

from appleauth import (
    AppleAuthClient,
    AppleAuthError,
    LoggerSink,
    legible_description,
    setup_logging,
)


class QueuePrompt:
    """Answers prompts from a queue filled by another part of the program."""
    
    def __init__(self, answers):
        self._answers = list(answers)
    
    def read_line(self, prompt):
        print(prompt, end='')
        return self._answers.pop(0) if self._answers else None


async def main():
    logging.basicConfig(level=logging.INFO)
    setup_logging(logging.INFO)
    
    # "sms" leaves the trusted-device prompt, "1" picks the first phone
    prompt = QueuePrompt(["sms", "1", "123456"])
    
    async with AppleAuthClient(
        prompt=prompt,
        log_sink=LoggerSink(),
        max_phone_selection_attempts=3
    ) as apple:
        try:
            result = await apple.login("user@example.com", "password")
        except AppleAuthError as e:
            print(legible_description(e, include_tag=True))
            return
        
        print(f"Status: {result.status.value}")


if __name__ == "__main__":
    asyncio.run(main())
