from core.models import Address, GeocodeResponse, SearchResponse


def test_response_round_trip_preserves_addresses():
    addresses = [
        Address(
            value="г Москва, ул Сухонская, д 11",
            unrestricted_value="127642, г Москва, ул Сухонская, д 11",
            city="Москва",
            street="Сухонская",
            house="11",
            postal_code="127642",
            lat="55.8782557",
            lon="37.65372",
        ),
        Address(value="г Казань"),
    ]

    body = SearchResponse(addresses=addresses).model_dump_json()

    assert SearchResponse.model_validate_json(body).addresses == addresses
    assert GeocodeResponse.model_validate_json(body).addresses == addresses


def test_empty_response_serializes_empty_list_not_null():
    assert SearchResponse().model_dump() == {"addresses": []}
