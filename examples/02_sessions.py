"""
Session management - Cookie persistence
"""
import asyncio
from pathlib import Path

from appleauth import APIConfig, AppleAuthClient


async def main():
    # Method 1: Cookie file (recommended)
    # First run: prompts for Apple ID, password and code
    # Next runs: the saved cookies are validated and reused
    config = APIConfig(cookie_file=Path("~/.config/appleauth/cookies"))
    async with AppleAuthClient(config) as apple:
        await apple.start()
        print(f"Authenticated: {apple.is_authenticated}")
    
    
    # Method 2: Direct credentials (code is still prompted for)
    async with AppleAuthClient() as apple:
        result = await apple.login("user@example.com", "password")
        print(f"Status: {result.status.value}")
    
    
    # Method 3: Check without signing in
    async with AppleAuthClient(config) as apple:
        print(f"Stored session valid: {await apple.is_session_valid()}")
    
    
    # Logout and delete stored cookies
    async with AppleAuthClient(config) as apple:
        await apple.logout()
        print("Logged out!")


if __name__ == "__main__":
    asyncio.run(main())
