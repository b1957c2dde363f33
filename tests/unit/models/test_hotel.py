"""Test normalized hotel record models."""

from staycache.models.hotel import HotelType, NormalizedHotelRecord, Pricing


class TestNormalizedHotelRecord:
    """Test record defaults."""

    def test_should_default_every_field(self):
        """Test an empty record is well formed."""
        record = NormalizedHotelRecord()
        assert record.id == ""
        assert record.pricing.min_price == 0
        assert record.rating.overall == 0.0
        assert record.amenities == []
        assert record.hotel_type == HotelType.OTHER
        assert record.availability.is_available is False
        assert record.is_fallback is False
        assert record.last_refreshed is not None

    def test_should_round_trip_through_json(self):
        """Test records survive the shared tier's JSON encoding."""
        record = NormalizedHotelRecord(id="1", name="テスト", hotel_type=HotelType.RYOKAN)
        restored = NormalizedHotelRecord.model_validate(record.model_dump(mode="json"))
        assert restored == record


class TestPricing:
    """Test price range formatting."""

    def test_should_report_missing_price(self):
        """Test zero prices."""
        assert Pricing().price_range == "Price not available"

    def test_should_report_single_price(self):
        """Test equal bounds."""
        assert Pricing(min_price=8000, max_price=8000).price_range == "¥8,000"

    def test_should_report_range(self):
        """Test distinct bounds."""
        assert Pricing(min_price=8000, max_price=25000).price_range == "¥8,000 - ¥25,000"
