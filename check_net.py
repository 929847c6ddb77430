import logging

from playfab.client import PlayFab
from playfab.config.settings import get_settings
from playfab.core.exceptions import PlayFabBaseError
from playfab.core.logger import setup_logging
from playfab.services.server_api import ServerApi


def main():
    """
    Живой smoke-тест: нужен .env с PLAYFAB_SECRET_KEY / PLAYFAB_TITLE_ID / PLAYFAB_CATALOG_VERSION.
    Делает один GetTitleData и один GetCatalogItems.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    print("--- Network Smoke Test (PlayFab Server API) ---")

    try:
        client = PlayFab.from_settings(settings, logger=logging.getLogger("playfab.smoke"))
    except PlayFabBaseError as e:
        print(f"SKIPPED: {e}")
        return

    with client:
        api = ServerApi(client)
        try:
            title_data = api.get_title_data([])
            print(f"[GetTitleData] keys: {sorted(title_data)}")

            catalog = api.get_catalog_items()
            print(f"[GetCatalogItems] items: {len(catalog)}")
            print("SUCCESS: PlayFab reachable, credentials accepted.")
        except PlayFabBaseError as e:
            print(f"FAILED: {e.__class__.__name__}: {e}")


if __name__ == "__main__":
    main()
