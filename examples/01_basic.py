"""
Basic sign-in - prompts for the Apple ID, password and security code
"""
import asyncio
from appleauth import AppleAuthClient


async def main():
    async with AppleAuthClient() as apple:
        result = await apple.start()
        
        if not result.authenticated:
            print("Account uses an unsupported second factor")
            return
        
        session = await apple.get_http_session()
        async with session.get("https://appstoreconnect.apple.com/olympus/v1/session") as response:
            data = await response.json()
            print(f"Provider: {data['provider']['name']}")


if __name__ == "__main__":
    asyncio.run(main())
