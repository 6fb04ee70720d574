"""Unit tests for estimator data models."""

import base64
from datetime import date

import pytest
from structlog.testing import capture_logs

from models.capability import Attachment, CapabilityRequest
from models.line_item import ItemCategory, LineItem
from models.project import ProjectCoefficients, ProjectSettings, ScheduleSettings
from models.validation import FindingType, ValidationFinding
from utils.coercion import coerce_float, coerce_positive_int


class TestLineItem:
    """Tests for LineItem."""

    def test_ids_are_unique(self):
        ids = {LineItem(name=f"Item {i}").id for i in range(50)}

        assert len(ids) == 50

    def test_accepts_wire_aliases(self):
        item = LineItem.model_validate(
            {"name": "Panel", "equipPrice": 5000, "workName": "Panel installation", "workPrice": 2500}
        )

        assert item.equip_price == 5000
        assert item.work_name == "Panel installation"
        assert item.work_price == 2500

    def test_payload_uses_aliases_and_keeps_all_fields(self):
        item = LineItem(name="Cable", model="KPSng", qty=10.5, unit="m",
                        equip_price=38.5, work_name="Cable laying", work_price=65,
                        category="cable")

        payload = item.to_payload()

        assert payload == {
            "id": item.id,
            "name": "Cable",
            "model": "KPSng",
            "qty": 10.5,
            "unit": "m",
            "equipPrice": 38.5,
            "workName": "Cable laying",
            "workPrice": 65.0,
            "category": "cable",
        }

    def test_display_model_falls_back_to_name(self):
        assert LineItem(name="Siren", model="").display_model == "Siren"
        assert LineItem(name="Siren", model="Mayak-12").display_model == "Mayak-12"

    @pytest.mark.parametrize("raw,expected", [("3", 3.0), ("2,5", 2.5), ("abc", 0.0), (None, 0.0), ("", 0.0)])
    def test_numeric_coercion(self, raw, expected):
        assert LineItem(qty=raw).qty == expected

    def test_assignment_is_coerced(self):
        item = LineItem(qty=2)

        item.qty = "oops"
        item.work_price = "120.5"

        assert item.qty == 0
        assert item.work_price == 120.5

    def test_negative_prices_are_kept(self):
        assert LineItem(equip_price=-100).equip_price == -100

    def test_unknown_category_falls_back(self):
        assert LineItem(category="software").category is ItemCategory.EQUIPMENT
        assert LineItem(category="Cable").category is ItemCategory.CABLE

    def test_amounts(self):
        item = LineItem(qty=3, equip_price=100, work_price=20)

        assert item.equipment_amount == 300
        assert item.labor_amount == 60
        assert item.amount == 360


class TestProjectSettings:
    """Tests for coefficients and schedule settings."""

    def test_coefficient_defaults(self):
        coefficients = ProjectCoefficients()

        assert coefficients.coef_pnr == 15
        assert coefficients.coef_unexpected == 2
        assert coefficients.coef_vat == 20

    def test_coefficient_aliases_and_coercion(self):
        coefficients = ProjectCoefficients.model_validate(
            {"coefPnr": "10", "coefUnexpected": "bad", "coefVat": 0}
        )

        assert coefficients.coef_pnr == 10
        assert coefficients.coef_unexpected == 0
        assert coefficients.coef_vat == 0

    @pytest.mark.parametrize("raw,expected", [(45, 45), ("60", 60), ("abc", 30), (0, 30), (-5, 30), (None, 30)])
    def test_duration_coercion(self, raw, expected):
        assert ScheduleSettings(start_date=date(2024, 1, 1), duration_days=raw).duration_days == expected

    def test_start_date_from_string(self):
        settings = ScheduleSettings.model_validate({"workStartDate": "2024-03-15", "workDuration": 20})

        assert settings.start_date == date(2024, 3, 15)
        assert settings.duration_days == 20

    def test_invalid_start_date_falls_back_to_today(self):
        assert ScheduleSettings(start_date="not a date").start_date == date.today()

    def test_project_settings_defaults(self):
        settings = ProjectSettings()

        assert settings.project_number == "KP-2023/10-45"
        assert settings.schedule.duration_days == 45
        assert settings.coefficients.coef_vat == 20


class TestValidationFinding:
    """Tests for ValidationFinding."""

    def test_parses_record(self):
        finding = ValidationFinding.model_validate(
            {"type": "error", "message": "Missing panel", "suggestion": "Add one"}
        )

        assert finding.type is FindingType.ERROR
        assert finding.suggestion == "Add one"

    def test_optional_suggestion(self):
        finding = ValidationFinding.model_validate({"type": "success", "message": "OK", "suggestion": ""})

        assert finding.suggestion is None

    def test_unknown_type_is_warning(self):
        assert ValidationFinding.model_validate({"type": "info", "message": "x"}).type is FindingType.WARNING

    def test_unknown_type_is_logged(self):
        with capture_logs() as logs:
            ValidationFinding.model_validate({"type": "info", "message": "x"})

        assert {"event": "validation_unknown_type", "type": "info", "log_level": "warning"} in logs


class TestAttachment:
    """Tests for Attachment."""

    def test_from_path_guesses_mime(self, tmp_path):
        path = tmp_path / "spec.pdf"
        path.write_bytes(b"%PDF-1.4")

        attachment = Attachment.from_path(path)

        assert attachment.name == "spec.pdf"
        assert attachment.mime_type == "application/pdf"
        assert attachment.data == b"%PDF-1.4"
        assert not attachment.is_image

    def test_from_base64_strips_data_url_prefix(self):
        encoded = base64.b64encode(b"png-bytes").decode()

        attachment = Attachment.from_base64("scan.png", "image/png", f"data:image/png;base64,{encoded}")

        assert attachment.data == b"png-bytes"
        assert attachment.is_image
        assert attachment.data_url() == f"data:image/png;base64,{encoded}"

    def test_request_defaults_to_json(self):
        assert CapabilityRequest(prompt="hi").response_format == "json"


class TestCoercion:
    """Tests for numeric coercion helpers."""

    def test_coerce_float_rejects_nan_and_bool(self):
        assert coerce_float(float("nan")) == 0.0
        assert coerce_float(True) == 0.0
        assert coerce_float("1 500,5") == 1500.5

    def test_coerce_positive_int_truncates(self):
        assert coerce_positive_int("45.7", default=30) == 45
        assert coerce_positive_int("0.5", default=30) == 30

    def test_coerce_positive_int_maximum(self):
        assert coerce_positive_int("1e20", default=30, maximum=36500) == 30
        assert coerce_positive_int(36500, default=30, maximum=36500) == 36500
        assert coerce_positive_int("1e20", default=30) == 10**20
