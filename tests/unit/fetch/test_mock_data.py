"""Test fallback dataset selection."""

import pytest

from staycache.fetch.mock_data import MOCK_VACANT_PLANS, MockDataset
from staycache.models.request import Endpoint, ExternalRequestContext


@pytest.fixture
def dataset():
    """Built-in fallback dataset."""
    return MockDataset()


def _context(endpoint=Endpoint.SIMPLE_SEARCH, **params):
    return ExternalRequestContext(endpoint=endpoint, params=params)


class TestMockDataset:
    """Test record selection and flagging."""

    def test_should_select_by_area_code(self, dataset):
        """Test middleClassCode picks the area's hotels."""
        records = dataset.records_for(_context(middleClassCode="osaka"))

        assert [r.id for r in records] == ["145832"]
        assert all(r.is_fallback for r in records)

    def test_unknown_area_should_use_default(self, dataset):
        """Test unmatched areas fall back to Tokyo."""
        records = dataset.records_for(_context(middleClassCode="sapporo"))
        assert [r.id for r in records] == ["143637", "177607"]

    def test_should_match_keyword(self, dataset):
        """Test keyword search across names and descriptions."""
        records = dataset.records_for(
            _context(Endpoint.KEYWORD_SEARCH, keyword="梅田")
        )
        assert [r.id for r in records] == ["145832"]

    def test_unmatched_keyword_should_never_be_empty(self, dataset):
        """Test fallback result is never empty."""
        records = dataset.records_for(_context(Endpoint.KEYWORD_SEARCH, keyword="札幌"))
        assert len(records) > 0

    def test_should_select_detail_by_hotel_number(self, dataset):
        """Test detail requests return the requested hotel."""
        records = dataset.records_for(_context(Endpoint.HOTEL_DETAIL, hotelNo=163289))

        assert len(records) == 1
        assert records[0].name == "ホテルグランヴィア京都"

    def test_should_limit_to_hits(self, dataset):
        """Test hits bounds the result."""
        assert len(dataset.records_for(_context(hits=1))) == 1

    def test_vacant_search_should_report_plans(self, dataset):
        """Test fallback vacancy records carry availability."""
        records = dataset.records_for(_context(Endpoint.VACANT_SEARCH, middleClassCode="kyoto"))

        assert records[0].availability.is_available is True
        assert records[0].availability.available_plans == MOCK_VACANT_PLANS

    def test_records_should_be_normalized(self, dataset):
        """Test fallback records go through the live normalizer."""
        record = dataset.records_for(_context(middleClassCode="tokyo"))[1]

        assert record.nearby_stations == ["JR新宿駅"]
        assert "Wi-Fi" in record.amenities
        assert record.pricing.max_price == 35000
