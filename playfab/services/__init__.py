from playfab.services.server_api import ServerApi

__all__ = ["ServerApi"]
