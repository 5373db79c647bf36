"""Example: Jamendo OAuth 2.0 authorization code flow."""

import asyncio
import os
from urllib.parse import parse_qs, urlparse

from jamendo import JamendoClient, JamendoConfig


async def main():
    """Authorize the app for a user, then favorite a track on their behalf."""

    print("Jamendo OAuth Example")
    print("=" * 50)

    if not os.environ.get("JAMENDO_CLIENT_ID") or not os.environ.get("JAMENDO_CLIENT_SECRET"):
        print("\nError: Missing credentials!")
        print("\nPlease set environment variables:")
        print("  export JAMENDO_CLIENT_ID='your_client_id'")
        print("  export JAMENDO_CLIENT_SECRET='your_client_secret'")
        return

    redirect_uri = os.environ.get("JAMENDO_REDIRECT_URI", "http://localhost:8000/callback")

    async with JamendoClient(JamendoConfig.from_env()) as client:
        url = client.authorize_url(redirect_uri)
        print("\n1. Open this URL and authorize the application:")
        print(f"   {url}")

        callback = input("\n2. Paste the URL you were redirected to: ").strip()
        query = parse_qs(urlparse(callback).query)

        if query.get("state", [None])[0] != client.oauth.last_state:
            print("\nError: state mismatch, aborting")
            return

        token = await client.grant(query["code"][0], redirect_uri)
        print(f"\n✓ Token granted (expires in {token.expires_in}s, scope: {token.scope})")

        # Track #245 - J.E.T. Apostrophe A.I.M.E by Both
        await client.set_favorite({"track_id": 245})
        print("✓ Track 245 added to favorites")

        # Expired tokens are refreshed before the next write
        await client.set_fan({"artist_id": 5})
        print("✓ Now a fan of artist 5")


if __name__ == "__main__":
    asyncio.run(main())
