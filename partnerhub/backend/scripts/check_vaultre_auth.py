import os
import asyncio
import httpx

URL = os.getenv("VAULTRE_API_URL", "https://ap-southeast-2.api.vaultre.com.au/api/v1.3").rstrip("/")


async def main():
    token = os.getenv("VAULTRE_API_TOKEN")
    key = os.getenv("VAULTRE_API_KEY")
    print("Token set:", bool(token), "len:", len(token) if token else None)
    print("Key set:", bool(key), "len:", len(key) if key else None)
    headers = {
        "Accept": "application/json",
        "Authorization": f"Bearer {token or ''}",
        "x-api-key": key or "",
    }
    async with httpx.AsyncClient(timeout=30) as client:
        r = await client.get(f"{URL}/properties/sale", headers=headers, params={"pagesize": 1})
        print("Status:", r.status_code)
        print("Body head:", r.text[:300])

asyncio.run(main())
