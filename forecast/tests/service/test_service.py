import threading

from forecast.config import UPSTREAM_ERROR_MESSAGE
from forecast.errors import UpstreamUnavailable
from forecast.service import Failure, ForecastService, Pending, Success


def test_current_is_pending_before_first_refresh(fake_reader):
    service = ForecastService(fake_reader)

    assert isinstance(service.current(), Pending)
    assert service.current().to_json() == {"status": "pending", "generation": 0}

def test_refresh_success(fake_reader):
    service = ForecastService(fake_reader)
    result = service.refresh()

    assert isinstance(result, Success)
    assert result.generation == 1
    assert result.report.prediction.forecasted_issuance == 200_000
    assert result.report.prediction.new_mint_rate_gwei == 2000
    assert service.current() == result
    assert service.last_report == result.report
    assert not service.is_refreshing

def test_refresh_upstream_failure_keeps_last_report(fake_reader):
    service = ForecastService(fake_reader)
    first = service.refresh()

    fake_reader.height = UpstreamUnavailable("explorer down")
    second = service.refresh()

    assert isinstance(second, Failure)
    assert second.generation == 2
    assert second.error_kind == "upstream_unavailable"
    assert second.message == UPSTREAM_ERROR_MESSAGE
    assert service.current() == second
    assert service.last_report == first.report

def test_refresh_division_by_zero_failure(fake_reader):
    fake_reader.period_l1_data_gas = 0
    service = ForecastService(fake_reader)
    result = service.refresh()

    assert isinstance(result, Failure)
    assert result.error_kind == "division_by_zero"
    assert "zero issuance forecast" in result.message
    assert service.last_report is None

def test_refresh_out_of_range_failure(fake_reader):
    fake_reader.height = -1
    result = ForecastService(fake_reader).refresh()

    assert isinstance(result, Failure)
    assert result.error_kind == "out_of_range"

def test_refresh_unexpected_error_becomes_failure(fake_reader):
    class BrokenReader(type(fake_reader)):
        def mint_state(self):
            return None

    result = ForecastService(BrokenReader()).refresh()

    assert isinstance(result, Failure)
    assert result.error_kind == "unexpected"
    assert result.message == UPSTREAM_ERROR_MESSAGE

def test_refresh_twice_gives_identical_reports(fake_reader):
    service = ForecastService(fake_reader)

    assert service.refresh().report == service.refresh().report

def test_stale_refresh_is_discarded(fake_reader):
    entered = threading.Event()
    release = threading.Event()

    class GatedReader(type(fake_reader)):
        def latest_block_height(self):
            reads = self.height_reads
            height = super().latest_block_height()
            if reads == 0:
                entered.set()
                release.wait(5)
                return height - 1_000
            return height

    reader = GatedReader(height=fake_reader.height, period_l1_data_gas=fake_reader.period_l1_data_gas)
    service = ForecastService(reader)
    outcome = {}
    slow = threading.Thread(target=lambda: outcome.setdefault("slow", service.refresh()))
    slow.start()
    assert entered.wait(5)

    fresh = service.refresh()
    release.set()
    slow.join(5)

    assert fresh.generation == 2
    assert outcome["slow"].generation == 1
    assert outcome["slow"].report.snapshot.block_height == 11_499
    assert service.current() == fresh
    assert service.last_report.snapshot.block_height == 12_499

def test_start_background_refresh(fake_reader):
    service = ForecastService(fake_reader)
    service.start_background_refresh()
    service.refresh_thread.join(5)

    assert isinstance(service.current(), Success)
    assert fake_reader.height_reads == 1

def test_is_refreshing_while_in_flight(fake_reader):
    entered = threading.Event()
    release = threading.Event()

    class GatedReader(type(fake_reader)):
        def latest_block_height(self):
            entered.set()
            release.wait(5)
            return super().latest_block_height()

    service = ForecastService(GatedReader(height=fake_reader.height, period_l1_data_gas=fake_reader.period_l1_data_gas))
    worker = threading.Thread(target=service.refresh)
    worker.start()
    assert entered.wait(5)

    assert service.is_refreshing
    release.set()
    worker.join(5)
    assert not service.is_refreshing
