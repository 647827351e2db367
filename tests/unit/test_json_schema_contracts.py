"""
Tests for JSON Schema Contract Validators

- Валидность самих схем
- Валидация payload, построенных моделями и функциями библиотеки
- Детекция нарушений required полей, типов и constraints
"""

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    ContractName,
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_contract,
)
from src.core.domain import EscrowRequest, GeoPoint, ProximityVerdict
from src.core.math.geodesy import evaluate_proximity
from src.marketplace.escrow import build_payment_intent_request


SCHEMA_NAMES = ["geo_point", "proximity_verdict", "escrow_request", "payment_intent_request"]


@pytest.fixture
def geo_point():
    return GeoPoint(
        latitude=40.7128,
        longitude=-74.0060,
        accuracy_meters=8.0,
        captured_at_epoch_ms=1_700_000_000_000,
    )


@pytest.fixture
def escrow_request():
    return EscrowRequest(
        item_price=450.0,
        auction_id="auction_123",
        buyer_id="buyer_1",
        seller_id="seller_1",
        product_name="Galaxy S22",
    )


# =============================================================================
# SCHEMAS
# =============================================================================


class TestSchemaLoader:
    @pytest.mark.parametrize("name", SCHEMA_NAMES)
    def test_schemas_load(self, name):
        schema = SchemaLoader().load_schema(name)
        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_schema_cached(self):
        loader = SchemaLoader()
        assert loader.load_schema("geo_point") is loader.load_schema("geo_point")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")

    def test_invalid_schema(self, tmp_path):
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# GEO POINT / VERDICT
# =============================================================================


class TestGeoContracts:
    def test_model_dump_is_valid(self, geo_point):
        validate_contract(ContractName.GEO_POINT, geo_point.model_dump())

    def test_latitude_out_of_range(self, geo_point):
        data = geo_point.model_dump()
        data["latitude"] = 91.0
        with pytest.raises(ValidationError):
            validate_contract(ContractName.GEO_POINT, data)

    def test_missing_accuracy(self, geo_point):
        data = geo_point.model_dump()
        del data["accuracy_meters"]
        with pytest.raises(ValidationError):
            validate_contract(ContractName.GEO_POINT, data)

    def test_unexpected_field(self, geo_point):
        data = geo_point.model_dump()
        data["altitude"] = 10.0
        assert ContractValidator(ContractName.GEO_POINT).is_valid(data) is False

    def test_verdict_is_valid(self, geo_point):
        verdict = evaluate_proximity(geo_point, geo_point)
        validate_contract(ContractName.PROXIMITY_VERDICT, verdict.to_dict())

    def test_undefined_verdict_rejected(self):
        """NaN расстояние не сериализуется как валидный verdict."""
        verdict = ProximityVerdict(distance_meters=float("nan"), within_range=False)
        with pytest.raises(ValidationError):
            validate_contract(ContractName.PROXIMITY_VERDICT, verdict.to_dict())

    def test_within_range_must_be_boolean(self):
        with pytest.raises(ValidationError):
            validate_contract(
                ContractName.PROXIMITY_VERDICT, {"distance_meters": 5.0, "within_range": "yes"}
            )


# =============================================================================
# ESCROW / PAYMENT
# =============================================================================


class TestPaymentContracts:
    def test_escrow_request_is_valid(self, escrow_request):
        validate_contract(ContractName.ESCROW_REQUEST, escrow_request.model_dump())

    def test_escrow_request_zero_price(self, escrow_request):
        data = escrow_request.model_dump()
        data["item_price"] = 0
        with pytest.raises(ValidationError):
            validate_contract(ContractName.ESCROW_REQUEST, data)

    def test_payment_request_is_valid(self):
        validate_contract(
            ContractName.PAYMENT_INTENT_REQUEST,
            build_payment_intent_request(453.0, metadata={"escrowId": "escrow_1_abcdefghi"}),
        )

    def test_payment_amount_below_minimum(self):
        payload = build_payment_intent_request(1.0)
        payload["amount"] = 49
        with pytest.raises(ValidationError):
            validate_contract(ContractName.PAYMENT_INTENT_REQUEST, payload)

    def test_payment_metadata_requires_source(self):
        payload = build_payment_intent_request(1.0)
        del payload["metadata"]["source"]
        with pytest.raises(ValidationError):
            validate_contract(ContractName.PAYMENT_INTENT_REQUEST, payload)

    def test_payment_metadata_values_are_strings(self):
        payload = build_payment_intent_request(1.0)
        payload["metadata"]["itemPrice"] = 1.0
        with pytest.raises(ValidationError):
            validate_contract(ContractName.PAYMENT_INTENT_REQUEST, payload)


# =============================================================================
# CONTRACT NAMES
# =============================================================================


class TestContractNames:
    @pytest.mark.parametrize("contract", list(ContractName))
    def test_every_contract_has_schema(self, contract):
        assert ContractValidator(contract).schema["$id"] == f"{contract.value}.json"

    def test_validator_accepts_plain_name(self):
        assert ContractValidator("geo_point").contract == ContractName.GEO_POINT

    def test_unknown_contract(self):
        with pytest.raises(ValueError):
            validate_contract("market_state", {})

    def test_validator_cached(self):
        assert get_validator(ContractName.GEO_POINT) is get_validator(ContractName.GEO_POINT)
