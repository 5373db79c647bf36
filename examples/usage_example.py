"""Example: Browsing the Jamendo catalog."""

import asyncio
import os
from datetime import date

import jamendo
from jamendo import JamendoClient, JamendoConfig, JamendoError


async def main():
    """Look up the track, album and artist used throughout the API docs."""

    print("Jamendo Catalog Example")
    print("=" * 50)

    if not os.environ.get("JAMENDO_CLIENT_ID"):
        print("\nError: Missing credentials!")
        print("\nPlease set:")
        print("  export JAMENDO_CLIENT_ID='your_client_id'")
        print("\nGet credentials from: https://devportal.jamendo.com")
        return

    config = jamendo.configure(
        config=JamendoConfig.from_dict({"logging": {"level": "WARNING", "format": "text"}})
    )

    async with JamendoClient(config) as client:
        # Track #245 - J.E.T. Apostrophe A.I.M.E by Both
        data = await client.tracks({"id": 245})
        track = data["results"][0]
        print(f"\n✓ Track: {track['name']} by {track['artist_name']}")
        print(f"  Album: {track['album_name']}")

        # Album #33 - Simple Exercice by Both
        data = await client.albums({"id": 33})
        print(f"✓ Album: {data['results'][0]['name']}")

        # Artist #5 - Both
        data = await client.artists({"id": 5})
        print(f"✓ Artist: {data['results'][0]['name']}")

        # Lists are joined, date pairs become datebetween ranges
        data = await client.albums(
            {
                "artist_id": [5, 7],
                "datebetween": (date(2004, 1, 1), date(2010, 12, 31)),
                "fullcount": True,
            }
        )
        print(f"\n✓ Albums 2004-2010: {data['headers'].get('results_fullcount')}")

        # Walk rock tracks page by page, stop after 5
        print("\nFirst rock tracks:")
        async for item in client.paginate("/tracks", {"tags": "rock"}, max_items=5):
            print(f"  {item['artist_name']} - {item['name']}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except JamendoError as e:
        print(f"\nError: {e}")
