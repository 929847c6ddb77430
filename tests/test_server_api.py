import json
from unittest.mock import MagicMock

import httpx
import pytest

from playfab.core.exceptions import ResponseFormatError
from playfab.services.server_api import ServerApi
from tests.helpers import ok


class Recorder:
    """Отвечает заданным data и запоминает (функция, тело запроса)."""

    def __init__(self, data=None, raw: bytes = None):
        self.data = data
        self.raw = raw
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.path, json.loads(request.content)))
        if self.raw is not None:
            return httpx.Response(200, content=self.raw)
        return ok(self.data)


@pytest.fixture
def api_with(make_client):
    def factory(data=None, raw=None):
        recorder = Recorder(data, raw)
        return ServerApi(make_client(recorder)), recorder
    return factory


def test_evaluate_random_table(api_with):
    api, recorder = api_with({"ResultItemId": "sword"})

    assert api.evaluate_random_table("loot", "P1") == "sword"
    assert recorder.calls == [(
        "/Server/EvaluateRandomResultTable",
        {"TableId": "loot", "PlayFabId": "P1", "CatalogVersion": "main"},
    )]


def test_grant_items_to_user(api_with):
    api, recorder = api_with({"ItemGrantResults": [{"ItemId": "sword", "Result": True}]})

    result = api.grant_items_to_user(["sword"], "P1")

    assert result == [{"ItemId": "sword", "Result": True}]
    assert recorder.calls[0][1]["CatalogVersion"] == "main"
    assert recorder.calls[0][1]["ItemIds"] == ["sword"]


def test_get_title_data_strips_bom(api_with):
    raw = b"\xef\xbb\xbf" + json.dumps({"code": 200, "data": {"Data": {"motd": "hi"}}}).encode()
    api, _ = api_with(raw=raw)

    assert api.get_title_data(["motd"]) == {"motd": "hi"}


def test_get_title_internal_data_without_data_returns_empty(api_with):
    api, _ = api_with({})

    assert api.get_title_internal_data(["x"]) == {}


def test_get_store_items_returns_items_and_store_id(api_with):
    api, recorder = api_with({"Store": [{"ItemId": "gem"}], "StoreId": "s1"})

    items, store_id = api.get_store_items("s1", "P1")

    assert items == [{"ItemId": "gem"}]
    assert store_id == "s1"
    assert recorder.calls[0][0] == "/Server/GetStoreItems"


def test_get_store_reads_marketing_metadata(api_with):
    api, recorder = api_with({"MarketingData": {"Metadata": {"banner": "x"}}})

    assert api.get_store("s1") == {"banner": "x"}
    assert recorder.calls[0][1] == {"CatalogVersion": "main", "StoreId": "s1"}


def test_get_store_without_marketing_data_fails(api_with):
    api, _ = api_with({"Store": []})

    with pytest.raises(ResponseFormatError):
        api.get_store("s1")


def test_virtual_currency_reads_inventory(api_with):
    api, recorder = api_with({"Inventory": [], "VirtualCurrency": {"GO": 10}})

    assert api.get_virtual_currency("P1") == {"GO": 10}
    assert recorder.calls[0][0] == "/Server/GetUserInventory"


def test_add_user_virtual_currency(api_with):
    api, recorder = api_with({"Balance": 15, "BalanceChange": 5})

    assert api.add_user_virtual_currency(5, "GO", "P1") == {"Balance": 15, "BalanceChange": 5}
    assert recorder.calls[0][1] == {"Amount": 5, "PlayFabId": "P1", "VirtualCurrency": "GO"}


@pytest.mark.parametrize("amount", [-1, 1.5, True])
def test_currency_amount_must_be_non_negative_int(api_with, amount):
    api, recorder = api_with({})

    with pytest.raises(ValueError):
        api.subtract_user_virtual_currency(amount, "GO", "P1")
    assert recorder.calls == []


def test_revoke_inventory_items_drops_empty_entries(api_with):
    api, recorder = api_with({})

    api.revoke_inventory_items([None, {"PlayFabId": "P1", "ItemInstanceId": "i1"}])

    assert recorder.calls == [(
        "/Server/RevokeInventoryItems",
        {"Items": [{"PlayFabId": "P1", "ItemInstanceId": "i1"}]},
    )]


def test_revoke_inventory_items_noop_when_empty():
    client = MagicMock()

    ServerApi(client).revoke_inventory_items([None, None])

    client.call.assert_not_called()


def test_get_player_tags(api_with):
    api, _ = api_with({"PlayFabId": "P1", "Tags": ["vip", "beta"]})

    assert api.get_player_tags("P1") == ["vip", "beta"]


def test_get_player_tags_rejects_non_string(api_with):
    api, _ = api_with({"Tags": ["vip", 3]})

    with pytest.raises(ResponseFormatError):
        api.get_player_tags("P1")


def test_consume_item_returns_raw_body(api_with):
    api, recorder = api_with({"ItemInstanceId": "i1", "RemainingUses": 0})

    body = api.consume_item("P1", "i1", 1)

    assert json.loads(body)["data"]["RemainingUses"] == 0
    assert recorder.calls[0][1] == {"PlayFabId": "P1", "ItemInstanceId": "i1", "ConsumeCount": 1}


def test_missing_data_envelope_fails(api_with):
    api, _ = api_with(raw=b'{"code": 200, "status": "OK"}')

    with pytest.raises(ResponseFormatError):
        api.get_catalog_items()


def test_missing_field_fails(api_with):
    api, _ = api_with({"Something": []})

    with pytest.raises(ResponseFormatError):
        api.get_user_inventory("P1")


@pytest.mark.parametrize("method, args, function_name", [
    ("update_user_read_only_data", ({"k": "v"}, "P1"), "UpdateUserReadOnlyData"),
    ("update_player_statistics", ([{"StatisticName": "xp", "Value": 1}], "P1"), "UpdatePlayerStatistics"),
    ("add_player_tag", ("vip", "P1"), "AddPlayerTag"),
    ("remove_player_tag", ("vip", "P1"), "RemovePlayerTag"),
    ("send_push_notification", ("hello", "P1"), "SendPushNotification"),
])
def test_fire_and_forget_calls(api_with, method, args, function_name):
    api, recorder = api_with({})

    assert getattr(api, method)(*args) is None
    assert recorder.calls[0][0] == f"/Server/{function_name}"


def test_read_calls_extract_payload(api_with):
    api, _ = api_with({
        "Data": {"k": {"Value": "v"}},
        "Statistics": [{"StatisticName": "xp", "Value": 3}],
        "InfoResultPayload": {"AccountInfo": {}},
        "Catalog": [{"ItemId": "sword"}],
    })

    assert api.get_user_read_only_data(["k"], "P1") == {"k": {"Value": "v"}}
    assert api.get_player_statistics(["xp"], "P1") == [{"StatisticName": "xp", "Value": 3}]
    assert api.get_player_combined_info({"GetUserAccountInfo": True}, "P1") == {"AccountInfo": {}}
    assert api.get_catalog_items() == [{"ItemId": "sword"}]


def test_grant_items_logs_through_client_logger(api_with, logger):
    api, _ = api_with({"ItemGrantResults": []})

    api.grant_items_to_user(["sword"], "P1")

    messages = [c.args[0] for c in logger.debug.call_args_list]
    assert "grant items to user playfabId: %s, itemIds %s" in messages
    assert "grant items response %s" in messages


@pytest.mark.parametrize("method", ["get_title_data", "get_title_internal_data"])
def test_title_data_must_be_an_object(api_with, method):
    api, _ = api_with({"Data": ["not", "a", "dict"]})

    with pytest.raises(ResponseFormatError):
        getattr(api, method)(["k"])


@pytest.mark.parametrize("method", ["get_title_data", "get_title_internal_data"])
def test_title_data_null_returns_empty(api_with, method):
    api, _ = api_with({"Data": None})

    assert getattr(api, method)(["k"]) == {}


def test_package_reexports():
    from playfab.models import ErrorEnvelope, SuccessEnvelope
    from playfab.models import envelope
    from playfab.services import ServerApi as exported

    assert exported is ServerApi
    assert SuccessEnvelope is envelope.SuccessEnvelope
    assert ErrorEnvelope is envelope.ErrorEnvelope
