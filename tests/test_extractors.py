"""Tests for listing record extraction and the cutoff stop."""
from datetime import datetime

import pytest

from conftest import FakePage
from harvester.parse.dates import POLISH, DateNormalizer, UnrecognizedMonthError
from harvester.parse.extractors.listing_html import OfferTableExtractor
from harvester.parse.extractors.listing_json import PayloadListingExtractor
from harvester.parse.html_parser import normalize_price
from harvester.parse.models import ParsedDate, RawDate

NOW = datetime(2024, 1, 10, 12, 0)


def offer(offer_id, title, date_label, price="1 200 zł", href=None):
    href = href or f"https://www.olx.pl/d/oferta/{offer_id}.html"
    return f"""
    <div class="offer-wrapper">
      <table data-id="{offer_id}">
        <tr>
          <td class="photo-cell"><a href="{href}"><img src="https://img.test/{offer_id}.jpg"></a></td>
          <td class="title-cell"><h3><a href="{href}">
            {title}
          </a></h3></td>
          <td class="td-price"><p class="price"><strong>{price}</strong></p></td>
        </tr>
        <tr>
          <td class="bottom-cell">
            <div class="breadcrumb x-normal"><span><i data-icon="location-filled"></i>Warszawa</span></div>
            <div class="breadcrumb x-normal"><span><i data-icon="clock"></i>{date_label}</span></div>
          </td>
        </tr>
      </table>
    </div>
    """


def listing(*offers):
    return f'<html><body><table id="offers_table"><tr><td>{"".join(offers)}</td></tr></table></body></html>'


@pytest.fixture
def extractor():
    return OfferTableExtractor(DateNormalizer(POLISH), "olx", clock=lambda: NOW)


def test_extracts_fresh_offers_in_order(extractor):
    """Test every fresh offer becomes a record, in page order."""
    page = FakePage(
        url="https://www.olx.pl/list",
        content=listing(
            offer("1", "Mieszkanie 2 pokoje", "dzisiaj 11:30"),
            offer("2", "Kawalerka", "wczoraj 13:00", price="2 500,50 zł"),
        ),
    )

    records, done = extractor.extract_page(page)

    assert done is False
    assert [r.id for r in records] == ["1", "2"]
    first = records[0]
    assert first.title == "Mieszkanie 2 pokoje"
    assert first.url == "https://www.olx.pl/d/oferta/1.html"
    assert first.img_url == "https://img.test/1.jpg"
    assert first.price == 1200.0
    assert first.description == ""
    assert first.date == ParsedDate(value=datetime(2024, 1, 10, 11, 30), same_day_token=True)
    assert records[1].price == 2500.5
    assert (records[1].debug_info.url, records[1].debug_info.idx) == ("https://www.olx.pl/list", 1)


def test_stale_offer_ends_the_page(extractor):
    """Test the first stale offer drops itself and everything after it."""
    page = FakePage(
        content=listing(
            offer("1", "Nowe", "dzisiaj 10:00"),
            offer("2", "Stare", "wczoraj 11:00"),
            offer("3", "Jeszcze nowsze", "dzisiaj 11:00"),
        )
    )

    records, done = extractor.extract_page(page)

    assert done is True
    assert [r.id for r in records] == ["1"]


def test_raw_date_never_triggers_cutoff(extractor):
    """Test offers with an unparseable date are kept and skipped by the cutoff."""
    page = FakePage(
        content=listing(
            offer("1", "Wyróżnione", "Wyróżnione ogłoszenie dnia"),
            offer("2", "Nowe", "dzisiaj 09:00"),
        )
    )

    records, done = extractor.extract_page(page)

    assert done is False
    assert records[0].date == RawDate(text="Wyróżnione ogłoszenie dnia")
    assert records[1].debug_info.idx == 1


def test_unknown_month_aborts_extraction(extractor):
    """Test an unknown month prefix propagates as ValueError."""
    page = FakePage(content=listing(offer("1", "Dziwne", "12 abc")))

    with pytest.raises(UnrecognizedMonthError):
        extractor.extract_page(page)


def test_non_numeric_price_kept_as_text(extractor):
    """Test a price that is not a number is kept as the stripped text."""
    page = FakePage(content=listing(offer("1", "Zamienię", "dzisiaj 11:00", price="Zamienię")))

    records, _ = extractor.extract_page(page)

    assert records[0].price == ""


def test_empty_page_is_not_done(extractor):
    """Test a page with no offers yields nothing and does not stop the crawl."""
    records, done = extractor.extract_page(FakePage(content="<html><body></body></html>"))
    assert records == []
    assert done is False


def test_payload_listing_extractor():
    """Test records read from a JSON listing payload."""
    extractor = PayloadListingExtractor(DateNormalizer(POLISH), "otodom", clock=lambda: NOW)
    page = FakePage(
        url="https://api.test/listings?offset=0",
        payload={
            "items": [
                {
                    "id": 101,
                    "title": " Apartament ",
                    "url": "https://otodom.test/101",
                    "price": {"label": "3 100 zł", "value": 3100},
                    "photo": "https://img.test/101.jpg",
                    "description": "Blisko metra",
                    "date_label": "dzisiaj 08:00",
                },
                {"id": 102, "title": "Stare", "date_label": "8 sty"},
            ]
        },
    )

    records, done = extractor.extract_page(page)

    assert done is True
    assert len(records) == 1
    record = records[0]
    assert (record.id, record.title, record.price) == ("101", "Apartament", 3100.0)
    assert record.description == "Blisko metra"
    assert record.debug_info.url == "https://api.test/listings?offset=0"


def test_payload_without_items():
    """Test a payload with no items yields nothing."""
    extractor = PayloadListingExtractor(DateNormalizer(POLISH), "otodom", clock=lambda: NOW)
    records, done = extractor.extract_page(FakePage(payload={"error": "nope"}))
    assert records == []
    assert done is False


def test_payload_skips_malformed_items(caplog):
    """Test non-object items are skipped with a warning and the rest still parse."""
    extractor = PayloadListingExtractor(DateNormalizer(POLISH), "otodom", clock=lambda: NOW)
    page = FakePage(
        payload={"items": ["garbage", None, {"id": 7, "title": "Dom", "date_label": "dzisiaj 09:00"}]}
    )

    with caplog.at_level("WARNING"):
        records, done = extractor.extract_page(page)

    assert [r.id for r in records] == ["7"]
    assert done is False
    assert "Skipped 2 malformed items" in caplog.text


def test_payload_items_not_a_list():
    """Test an items value that is not a list yields nothing."""
    extractor = PayloadListingExtractor(DateNormalizer(POLISH), "otodom", clock=lambda: NOW)
    records, done = extractor.extract_page(FakePage(payload={"items": "garbage"}))
    assert records == []
    assert done is False


def test_payload_zero_id_is_kept():
    """Test a falsy but present id is not blanked."""
    extractor = PayloadListingExtractor(DateNormalizer(POLISH), "otodom", clock=lambda: NOW)
    page = FakePage(payload={"items": [{"id": 0, "price": 0, "date_label": "dzisiaj 09:00"}]})

    records, _ = extractor.extract_page(page)

    assert records[0].id == "0"
    assert records[0].title == ""
    assert records[0].price == 0.0


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1 200 zł", 1200.0),
        ("2 500,50 zł", 2500.5),
        ("99.99", 99.99),
        ("Za darmo", ""),
        ("1.200,50 zł", "1.200.50"),
        ("", ""),
    ],
)
def test_normalize_price(text, expected):
    """Test price text normalization."""
    assert normalize_price(text) == expected
