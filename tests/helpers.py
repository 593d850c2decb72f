"""Test doubles and builders shared by the unit tests."""
import json
from collections import deque
from typing import List, Optional

from appleauth.core.api import APIResponse, PreparedRequest


def make_response(
    status: int = 200,
    body=None,
    headers: Optional[dict] = None,
    url: str = 'https://example.test/',
    method: str = 'GET'
) -> APIResponse:
    """Build an APIResponse; dict/list bodies are JSON encoded."""
    if body is None:
        raw = b''
    elif isinstance(body, bytes):
        raw = body
    elif isinstance(body, str):
        raw = body.encode('utf-8')
    else:
        raw = json.dumps(body).encode('utf-8')
    return APIResponse(status=status, headers=headers or {}, body=raw, url=url, method=method)


class FakeAPIClient:
    """Records sent requests and replays queued responses in order."""
    
    def __init__(self, *responses: APIResponse):
        self.responses = deque(responses)
        self.sent: List[PreparedRequest] = []
        self.cookie_jar = FakeCookieJar()
        self.closed = False
    
    def queue(self, *responses: APIResponse) -> 'FakeAPIClient':
        self.responses.extend(responses)
        return self
    
    async def ensure_session(self):
        return self
    
    async def close(self):
        self.closed = True
    
    async def send(self, request: PreparedRequest) -> APIResponse:
        self.sent.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request {request.method} {request.url}")
        return self.responses.popleft()
    
    @property
    def urls(self) -> List[str]:
        return [request.url for request in self.sent]


class FakeCookieJar:
    def __init__(self):
        self.cleared = False
    
    def clear(self):
        self.cleared = True


class ScriptedPrompt:
    """Answers prompts from a fixed script and records what was asked."""
    
    def __init__(self, *answers: Optional[str]):
        self.answers = deque(answers)
        self.prompts: List[str] = []
    
    def read_line(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt {prompt!r}")
        return self.answers.popleft()


class RecordingSink:
    def __init__(self):
        self.messages: List[str] = []
    
    def log(self, message: str) -> None:
        self.messages.append(message)



def auth_options_payload(
    phones=None,
    devices=None,
    no_trusted_devices=None,
    length: int = 6,
    **flags
) -> dict:
    """Auth options body as sent by the provider."""
    payload = {
        'securityCode': {
            'length': length,
            'tooManyCodesSent': flags.get('too_many_codes_sent', False),
            'tooManyCodesValidated': flags.get('too_many_codes_validated', False),
            'securityCodeLocked': flags.get('security_code_locked', False),
            'securityCodeCooldown': flags.get('security_code_cooldown', False),
        }
    }
    if phones is not None:
        payload['trustedPhoneNumbers'] = phones
    if devices is not None:
        payload['trustedDevices'] = devices
    if no_trusted_devices is not None:
        payload['noTrustedDevices'] = no_trusted_devices
    return payload
