from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from playfab.core.exceptions import ResponseFormatError
from playfab.models.envelope import SuccessEnvelope

SERVER_API = "Server"
UTF8_BOM = b"\xef\xbb\xbf"


def _data(body: bytes, function_name: str) -> Dict[str, Any]:
    """Достаёт объект data из успешного ответа."""
    try:
        envelope = SuccessEnvelope.model_validate_json(body)
    except ValidationError as e:
        raise ResponseFormatError(f"Failed to parse {function_name} result: {e}") from e
    if envelope.data is None:
        raise ResponseFormatError(f"Failed to parse {function_name} result: no data")
    return envelope.data


def _field(data: Mapping[str, Any], key: str, expected: type, function_name: str) -> Any:
    value = data.get(key)
    if not isinstance(value, expected):
        raise ResponseFormatError(f"Failed to parse {function_name} {key}")
    return value


def _optional_dict(data: Mapping[str, Any], key: str, function_name: str) -> Dict[str, Any]:
    """Как _field, но отсутствующий ключ (или null) даёт пустой dict."""
    if data.get(key) is None:
        return {}
    return _field(data, key, dict, function_name)


class ServerApi:
    """
    Обёртки над Server API.
    Каждый метод: собрать JSON, вызвать client.call, достать поле из data.
    """

    def __init__(self, client: Any):
        self.client = client

    def _post(self, function_name: str, body: Mapping[str, Any]) -> bytes:
        return self.client.call("POST", SERVER_API, function_name, body)

    # --- Random tables ---

    def evaluate_random_table(self, table_id: str, playfab_id: str) -> str:
        fn = "EvaluateRandomResultTable"
        body = self._post(fn, {
            "TableId": table_id,
            "PlayFabId": playfab_id,
            "CatalogVersion": self.client.catalog_version,
        })
        return _field(_data(body, fn), "ResultItemId", str, fn)

    # --- User data ---

    def update_user_read_only_data(self, data: Mapping[str, str], playfab_id: str) -> None:
        self._post("UpdateUserReadOnlyData", {"Data": dict(data), "PlayFabId": playfab_id})

    def get_user_read_only_data(self, keys: Sequence[str], playfab_id: str) -> Dict[str, Any]:
        fn = "GetUserReadOnlyData"
        body = self._post(fn, {"Keys": list(keys), "PlayFabId": playfab_id})
        return _field(_data(body, fn), "Data", dict, fn)

    # --- Player ---

    def get_player_statistics(self, statistic_names: Sequence[str], playfab_id: str) -> List[Dict[str, Any]]:
        fn = "GetPlayerStatistics"
        body = self._post(fn, {"PlayFabId": playfab_id, "StatisticNames": list(statistic_names)})
        return _field(_data(body, fn), "Statistics", list, fn)

    def update_player_statistics(self, statistics: Sequence[Mapping[str, Any]], playfab_id: str) -> None:
        self._post("UpdatePlayerStatistics", {
            "PlayFabId": playfab_id,
            "Statistics": [dict(s) for s in statistics],
        })

    def get_player_combined_info(self, request_parameters: Mapping[str, Any], playfab_id: str) -> Dict[str, Any]:
        fn = "GetPlayerCombinedInfo"
        body = self._post(fn, {
            "PlayFabId": playfab_id,
            "InfoRequestParameters": dict(request_parameters),
        })
        return _field(_data(body, fn), "InfoResultPayload", dict, fn)

    def add_player_tag(self, tag: str, playfab_id: str) -> None:
        self._post("AddPlayerTag", {"PlayFabId": playfab_id, "TagName": tag})

    def remove_player_tag(self, tag: str, playfab_id: str) -> None:
        self._post("RemovePlayerTag", {"PlayFabId": playfab_id, "TagName": tag})

    def get_player_tags(self, playfab_id: str) -> List[str]:
        fn = "GetPlayerTags"
        data = _data(self._post(fn, {"PlayFabId": playfab_id}), fn)
        tags = data.get("Tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ResponseFormatError("Failed to parse tags result")
        return list(tags)

    def send_push_notification(self, message: str, recipient: str) -> None:
        self._post("SendPushNotification", {"Message": message, "Recipient": recipient})

    # --- Title data ---

    def get_title_data(self, keys: Sequence[str]) -> Dict[str, Any]:
        fn = "GetTitleData"
        body = self._post(fn, {"Keys": list(keys)})
        # Title Data иногда приходит с BOM
        if body.startswith(UTF8_BOM):
            body = body[len(UTF8_BOM):]
        return _optional_dict(_data(body, fn), "Data", fn)

    def get_title_internal_data(self, keys: Sequence[str]) -> Dict[str, Any]:
        fn = "GetTitleInternalData"
        return _optional_dict(_data(self._post(fn, {"Keys": list(keys)}), fn), "Data", fn)

    # --- Catalog & Stores ---

    def get_catalog_items(self) -> List[Dict[str, Any]]:
        fn = "GetCatalogItems"
        body = self._post(fn, {"CatalogVersion": self.client.catalog_version})
        return _field(_data(body, fn), "Catalog", list, fn)

    def get_store_items(self, store_id: str, playfab_id: str) -> Tuple[List[Dict[str, Any]], str]:
        fn = "GetStoreItems"
        body = self._post(fn, {
            "CatalogVersion": self.client.catalog_version,
            "StoreId": store_id,
            "PlayFabId": playfab_id,
        })
        data = _data(body, fn)
        return _field(data, "Store", list, fn), _field(data, "StoreId", str, fn)

    def get_store(self, store_id: str) -> Dict[str, Any]:
        """Метаданные магазина (MarketingData.Metadata)."""
        fn = "GetStoreItems"
        body = self._post(fn, {"CatalogVersion": self.client.catalog_version, "StoreId": store_id})
        marketing = _field(_data(body, fn), "MarketingData", dict, fn)
        return _field(marketing, "Metadata", dict, fn)

    # --- Inventory ---

    def get_user_inventory(self, playfab_id: str) -> List[Dict[str, Any]]:
        fn = "GetUserInventory"
        body = self._post(fn, {"PlayFabId": playfab_id})
        return _field(_data(body, fn), "Inventory", list, fn)

    def grant_items_to_user(self, item_ids: Sequence[str], playfab_id: str) -> List[Dict[str, Any]]:
        fn = "GrantItemsToUser"
        self.client.logger.debug("grant items to user playfabId: %s, itemIds %s", playfab_id, list(item_ids))
        body = self._post(fn, {
            "ItemIds": list(item_ids),
            "PlayFabId": playfab_id,
            "CatalogVersion": self.client.catalog_version,
        })
        self.client.logger.debug("grant items response %s", body.decode("utf-8", errors="replace"))
        return _field(_data(body, fn), "ItemGrantResults", list, fn)

    def consume_item(self, playfab_id: str, item_instance_id: str, consume_count: int) -> bytes:
        return self._post("ConsumeItem", {
            "PlayFabId": playfab_id,
            "ItemInstanceId": item_instance_id,
            "ConsumeCount": consume_count,
        })

    def revoke_inventory_items(self, items: Sequence[Optional[Mapping[str, Any]]]) -> None:
        # Пустые ячейки выбрасываем; если ничего не осталось, запрос не шлём
        payload = [dict(item) for item in items if item is not None]
        if not payload:
            return
        self._post("RevokeInventoryItems", {"Items": payload})

    # --- Virtual currency ---

    def get_virtual_currency(self, playfab_id: str) -> Dict[str, Any]:
        fn = "GetUserInventory"
        body = self._post(fn, {"PlayFabId": playfab_id})
        return _field(_data(body, fn), "VirtualCurrency", dict, fn)

    def add_user_virtual_currency(self, amount: int, currency_id: str, playfab_id: str) -> Dict[str, Any]:
        return self._modify_currency("AddUserVirtualCurrency", amount, currency_id, playfab_id)

    def subtract_user_virtual_currency(self, amount: int, currency_id: str, playfab_id: str) -> Dict[str, Any]:
        return self._modify_currency("SubtractUserVirtualCurrency", amount, currency_id, playfab_id)

    def _modify_currency(self, fn: str, amount: int, currency_id: str, playfab_id: str) -> Dict[str, Any]:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"amount must be a non-negative integer, got {amount!r}")
        body = self._post(fn, {
            "Amount": amount,
            "PlayFabId": playfab_id,
            "VirtualCurrency": currency_id,
        })
        return _data(body, fn)
