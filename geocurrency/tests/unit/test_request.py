"""
Unit tests for request overrides and log masking.
"""

import json
import logging

from geocurrency.core.config import settings
from geocurrency.core.logging import IPMaskingFormatter, TextFormatter, mask_ip_addresses
from geocurrency.core.request import Overrides, StaticRequestContext


class TestOverrides:
    def test_reads_query_and_header(self) -> None:
        context = StaticRequestContext.build(
            cc="br", currency="brl", culture="pt-BR", accept_language="pt-BR,pt;q=0.9"
        )

        overrides = Overrides.from_request(context)

        assert overrides.cc == "br"
        assert overrides.currency == "brl"
        assert overrides.culture == "pt-BR"
        assert overrides.accept_language == "pt-BR,pt;q=0.9"

    def test_built_headers_are_case_insensitive(self) -> None:
        context = StaticRequestContext.build(accept_language="de-DE")

        assert context.headers.get("accept-language") == "de-DE"
        assert context.headers.get("ACCEPT-LANGUAGE") == "de-DE"

    def test_blank_values_are_none(self) -> None:
        context = StaticRequestContext.build(cc=" ", currency="", culture="\t")

        assert Overrides.from_request(context) == Overrides()

    def test_no_request(self) -> None:
        assert Overrides.from_request(None) == Overrides()


class TestIPMasking:
    def test_masks_last_two_octets(self) -> None:
        assert mask_ip_addresses("lookup for 203.0.113.7 failed") == "lookup for 203.0.x.x failed"

    def test_leaves_other_text(self) -> None:
        assert mask_ip_addresses("rate 4000.25 COP") == "rate 4000.25 COP"

    def make_record(self) -> logging.LogRecord:
        record = logging.LogRecord(
            name="geocurrency.test",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Lookup for %s failed",
            args=("203.0.113.7",),
            exc_info=None,
        )
        record.client_ip = "198.51.100.23"
        return record

    def test_json_formatter_masks_args_and_extra(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "mask_client_ips_in_logs", True)
        record = self.make_record()

        data = json.loads(IPMaskingFormatter(fmt="%(levelname)s %(message)s").format(record))

        assert data["message"] == "Lookup for 203.0.x.x failed"
        assert data["client_ip"] == "198.51.x.x"

    def test_text_formatter_masks_args(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "mask_client_ips_in_logs", True)

        text = TextFormatter(fmt="%(message)s").format(self.make_record())

        assert text == "Lookup for 203.0.x.x failed"

    def test_record_is_not_modified(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "mask_client_ips_in_logs", True)
        record = self.make_record()

        IPMaskingFormatter(fmt="%(message)s").format(record)

        assert record.args == ("203.0.113.7",)
        assert record.client_ip == "198.51.100.23"
        assert record.msg == "Lookup for %s failed"
