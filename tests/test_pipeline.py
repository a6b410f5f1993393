"""Tests for the scan pipeline driving every stage."""

import threading

import pytest

import pymysqltuner as pt
import pymysqltuner.errors as errors
import pymysqltuner.reporter as rp
import pymysqltuner.system as system
import pymysqltuner.tuner as tuner
from conftest import (
    GIBIBYTE,
    HEALTHY_STATUS,
    HEALTHY_VARIABLES,
    MEBIBYTE,
    SUPPORTED_DAY,
    FakeDataAccess,
    FakeSystem,
)

NO_QUERIES = "Your server has not answered any queries - cannot continue..."


def run(server, data_access, system_info, prompt, reporter, option, **kwargs):
    return pt.calculate(
        server,
        data_access,
        system_info,
        prompt,
        reporter,
        option=option,
        today=SUPPORTED_DAY,
        **kwargs,
    )


class TestHealthyServer:
    """A well tuned 5.7 server."""

    def test_completes(self, data_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        assert run(server, data_access, system_info, prompt, reporter, option) is True
        assert reporter.progress == [True]

    def test_preamble_first(self, data_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        assert reporter.texts()[:3] == [
            f"PyMySQLTuner {pt.__version__}",
            "Performing tests on localhost:3306",
            "Currently running supported MySQL version 5.7.42-log",
        ]

    def test_no_recommendations(self, data_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        assert reporter.texts(tuner.Status.RECOMMENDATION) == []
        assert reporter.texts()[-2:] == [
            "No additional performance recommendations are available.",
            "Scan Complete",
        ]

    def test_local_memory_from_system(self, data_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        assert server.physical_memory == 8 * GIBIBYTE
        assert server.swap_memory == 2 * GIBIBYTE

    def test_storage_engine_audit(self, data_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        assert "Archive Engine Installed" in reporter.texts(tuner.Status.PASS)
        assert "Berkeley DB Engine Not Installed" in reporter.texts(tuner.Status.FAIL)
        assert "Data in InnoDB tables: 50M (Tables: 40)" in reporter.texts(tuner.Status.INFO)
        assert "Total fragmented tables: 0" in reporter.texts(tuner.Status.PASS)

    def test_deterministic(self, data_access, system_info, prompt, option):
        server = tuner.ServerSnapshot(password="secret")
        first = rp.CollectingReporter()
        second = rp.CollectingReporter()
        run(server, data_access, system_info, prompt, first, option)
        run(server, data_access, system_info, prompt, second, option)
        assert first.events == second.events
        assert first.progress == second.progress


class TestPreamble:
    def test_empty_password_is_security_risk(self, system_info, reporter, option):
        server = tuner.ServerSnapshot(host="db.example.com", password="")
        data_access = FakeDataAccess(HEALTHY_VARIABLES, HEALTHY_STATUS)
        prompt = system.OptionPrompt(option, ask=lambda question: "4096")
        run(server, data_access, system_info, prompt, reporter, option)

        texts = reporter.texts()
        risk = next(i for i, text in enumerate(texts) if "SECURITY RISK" in text)
        assert reporter.events[risk].level is tuner.Status.FAIL
        assert risk == 2
        assert risk < texts.index("Assuming 4096 MB of physical memory")

    def test_password_set(self, data_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        assert not any("SECURITY RISK" in text for text in reporter.texts())


class TestRemoteMemory:
    def test_operator_answers(self, data_access, system_info, reporter, option):
        server = tuner.ServerSnapshot(host="db.example.com", password="secret")
        prompt = system.OptionPrompt(option, ask=lambda question: "4096")
        run(server, data_access, system_info, prompt, reporter, option)
        assert server.physical_memory == 4096 * MEBIBYTE
        assert server.swap_memory == 4096 * MEBIBYTE
        assert "Assuming 4096 MB of swap space" in reporter.texts(tuner.Status.INFO)

    def test_unanswered_assumes_this_computer(self, data_access, system_info, reporter, option):
        option.no_ask = True
        server = tuner.ServerSnapshot(host="db.example.com", password="secret")
        run(server, data_access, system_info, system.OptionPrompt(option), reporter, option)
        assert server.physical_memory == 8 * GIBIBYTE
        assert server.swap_memory == 2 * GIBIBYTE
        assert "Assuming the same amount of physical memory as this computer" in reporter.texts()
        assert "Assuming the same amount of swap space as this computer" in reporter.texts()

    def test_forced_memory(self, data_access, system_info, reporter, option):
        option.force_mem = 2048
        option.force_swap = 0
        server = tuner.ServerSnapshot(host="db.example.com", password="secret")
        run(server, data_access, system_info, system.OptionPrompt(option), reporter, option)
        assert server.physical_memory == 2048 * MEBIBYTE
        assert server.swap_memory == 0


class TestEarlyTermination:
    """A server that answered no queries stops after the calculation stage."""

    @pytest.fixture
    def idle_access(self):
        return FakeDataAccess(HEALTHY_VARIABLES, dict(HEALTHY_STATUS, Questions="0"))

    def test_single_fail(self, idle_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        assert run(server, idle_access, system_info, prompt, reporter, option) is False
        assert reporter.texts().count(NO_QUERIES) == 1
        assert reporter.events[-1] == tuner.DiagnosticEvent(tuner.Status.FAIL, NO_QUERIES)

    def test_progress_incomplete(self, idle_access, system_info, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, idle_access, system_info, prompt, reporter, option)
        assert reporter.progress == [False]
        assert "Scan Complete" not in reporter.texts()
        assert not any(text.startswith("Up for:") for text in reporter.texts())

    def test_missing_questions(self, system_info, prompt, reporter, option):
        status = {name: value for name, value in HEALTHY_STATUS.items() if name != "Questions"}
        server = tuner.ServerSnapshot(password="secret")
        run(server, FakeDataAccess(HEALTHY_VARIABLES, status), system_info, prompt, reporter, option)
        assert reporter.events[-1].text == NO_QUERIES


class TestFailures:
    def test_load_failure_propagates(self, system_info, prompt, reporter, option):
        data_access = FakeDataAccess(
            HEALTHY_VARIABLES,
            HEALTHY_STATUS,
            load_error=errors.DataAccessError("Can't connect to MySQL server"),
        )
        server = tuner.ServerSnapshot(password="secret")
        with pytest.raises(errors.DataAccessError):
            run(server, data_access, system_info, prompt, reporter, option)
        assert reporter.events[-1] == tuner.DiagnosticEvent(
            tuner.Status.FAIL,
            "DataAccessError: Can't connect to MySQL server",
        )
        assert reporter.progress == [False]

    def test_missing_version(self, system_info, prompt, reporter, option):
        variables = {name: value for name, value in HEALTHY_VARIABLES.items() if name != "version"}
        server = tuner.ServerSnapshot(password="secret")
        with pytest.raises(errors.MissingPrecondition):
            run(server, FakeDataAccess(variables, HEALTHY_STATUS), system_info, prompt, reporter, option)
        assert reporter.events[-1].level is tuner.Status.FAIL
        assert reporter.events[-1].text.startswith("MissingPrecondition: ")
        assert reporter.progress == [False]

    def test_security_check_degrades(self, system_info, prompt, reporter, option, denied):
        data_access = FakeDataAccess(HEALTHY_VARIABLES, HEALTHY_STATUS, password_error=denied)
        server = tuner.ServerSnapshot(password="secret")
        assert run(server, data_access, system_info, prompt, reporter, option) is True
        assert f"Unable to check for accounts without password: {denied}" in reporter.texts(tuner.Status.FAIL)
        assert reporter.progress == [True]


class TestSecurity:
    def test_passwordless_accounts(self, system_info, prompt, reporter, option):
        data_access = FakeDataAccess(
            HEALTHY_VARIABLES,
            HEALTHY_STATUS,
            passwordless=["app@%", "root@localhost"],
        )
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        fails = reporter.texts(tuner.Status.FAIL)
        assert "User 'app@%' has no password set." in fails
        assert "User 'root@localhost' has no password set." in fails
        assert "All database users have passwords assigned" not in reporter.texts()

    def test_skip_password(self, data_access, system_info, prompt, reporter, option):
        option.skip_password = True
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, system_info, prompt, reporter, option)
        assert "Skipped due to --skip-password option" in reporter.texts(tuner.Status.INFO)


class TestCancellation:
    def test_cancel_before_start(self, data_access, system_info, prompt, reporter, option):
        cancel = threading.Event()
        cancel.set()
        server = tuner.ServerSnapshot(password="secret")
        assert run(server, data_access, system_info, prompt, reporter, option, cancel=cancel) is False
        assert reporter.events == []
        assert reporter.progress == []

    def test_closed_reporter_stops_silently(self, data_access, system_info, prompt, option):
        target = rp.CollectingReporter()
        queue_reporter = rp.QueueReporter(target)
        queue_reporter.close()
        server = tuner.ServerSnapshot(password="secret")
        assert run(server, data_access, system_info, prompt, queue_reporter, option) is False
        assert queue_reporter.drain() == 0
        assert target.events == []


class TestTrailer:
    def test_memory_warning_before_adjustments(self, system_info, prompt, reporter, option):
        data_access = FakeDataAccess(dict(HEALTHY_VARIABLES, query_cache_size="0"), HEALTHY_STATUS)
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, FakeSystem(physical=256 * MEBIBYTE), prompt, reporter, option)

        texts = reporter.texts()
        tail = texts[texts.index("Reduce your overall MySQL memory footprint for system stability"):]
        assert tail == [
            "Reduce your overall MySQL memory footprint for system stability",
            "MySQL's maximum memory usage is dangerously high",
            "Add RAM before increasing MySQL buffer variables",
            "query_cache_size (>= 8M)",
            "Scan Complete",
        ]
        assert reporter.texts(tuner.Status.RECOMMENDATION) == [
            "Reduce your overall MySQL memory footprint for system stability",
            "query_cache_size (>= 8M)",
        ]


class TestArchitecture:
    def test_32bit_with_large_memory(self, data_access, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, FakeSystem(is_64bit=False), prompt, reporter, option)
        assert "Switch to 64-bit OS - MySQL cannot currently use all of your RAM" in reporter.texts(tuner.Status.FAIL)

    def test_32bit_with_small_memory(self, data_access, prompt, reporter, option):
        server = tuner.ServerSnapshot(password="secret")
        run(server, data_access, FakeSystem(physical=GIBIBYTE, is_64bit=False), prompt, reporter, option)
        assert "Operating on 32-bit architecture with less than 2GB RAM" in reporter.texts(tuner.Status.PASS)


class TestBackground:
    def test_events_delivered_on_owning_thread(self, data_access, system_info, prompt, option):
        target = rp.CollectingReporter()
        queue_reporter = rp.QueueReporter(target)
        server = tuner.ServerSnapshot(password="secret")

        thread = pt.calculate_in_background(
            server,
            data_access,
            system_info,
            prompt,
            queue_reporter,
            option=option,
            today=SUPPORTED_DAY,
        )
        thread.join(timeout=10)
        assert not thread.is_alive()

        assert target.events == []
        assert queue_reporter.drain() > 0
        assert target.events[-1].text == "Scan Complete"
        assert target.progress == [True]

    def test_result_kept_on_thread(self, data_access, system_info, prompt, option):
        thread = pt.calculate_in_background(
            tuner.ServerSnapshot(password="secret"),
            data_access,
            system_info,
            prompt,
            rp.CollectingReporter(),
            option=option,
            today=SUPPORTED_DAY,
        )
        thread.join(timeout=10)
        assert thread.result is True
        assert thread.error is None

    def test_early_termination_result(self, system_info, prompt, option):
        idle_access = FakeDataAccess(HEALTHY_VARIABLES, dict(HEALTHY_STATUS, Questions="0"))
        thread = pt.calculate_in_background(
            tuner.ServerSnapshot(password="secret"),
            idle_access,
            system_info,
            prompt,
            rp.CollectingReporter(),
            option=option,
            today=SUPPORTED_DAY,
        )
        thread.join(timeout=10)
        assert thread.result is False
        assert thread.error is None


class TestStorageEngines:
    @pytest.mark.parametrize("have_engine, label, recommendation", [
        ("have_innodb", "InnoDB", "Add skip-innodb to MySQL configuration to disable InnoDB"),
        ("have_bdb", "BDB", "Add skip-bdb to MySQL configuration to disable BDB"),
        ("have_isam", "ISAM", "Add skip-isam to MySQL configuration to disable ISAM (MySQL > 4.1.0)"),
    ])
    def test_enabled_but_unused(self, system_info, prompt, reporter, option, have_engine, label, recommendation):
        data_access = FakeDataAccess(dict(HEALTHY_VARIABLES, **{have_engine: "YES"}), HEALTHY_STATUS)
        data_access.engine_data_size = {"MyISAM": MEBIBYTE}
        data_access.engine_table_count = {"MyISAM": 3}
        run(tuner.ServerSnapshot(password="secret"), data_access, system_info, prompt, reporter, option)
        assert f"{label} is enabled but isn't being used" in reporter.texts(tuner.Status.FAIL)
        assert recommendation in reporter.texts(tuner.Status.RECOMMENDATION)

    def test_used_engine_not_flagged(self, data_access, system_info, prompt, reporter, option):
        run(tuner.ServerSnapshot(password="secret"), data_access, system_info, prompt, reporter, option)
        assert not any("isn't being used" in text for text in reporter.texts())

    def test_fragmented_tables(self, system_info, prompt, reporter, option):
        data_access = FakeDataAccess(HEALTHY_VARIABLES, HEALTHY_STATUS)
        data_access.fragmented_table_count = 4
        run(tuner.ServerSnapshot(password="secret"), data_access, system_info, prompt, reporter, option)
        assert "Total fragmented tables: 4" in reporter.texts(tuner.Status.FAIL)
        assert "Run OPTIMIZE TABLE to defragment tables for better performance" in reporter.texts(
            tuner.Status.RECOMMENDATION
        )

    def test_skip_size(self, data_access, system_info, prompt, reporter, option):
        option.skip_size = True
        data_access.fragmented_table_count = 4
        run(tuner.ServerSnapshot(password="secret"), data_access, system_info, prompt, reporter, option)
        assert "Skipped due to --skip-size option" in reporter.texts(tuner.Status.INFO)
        assert not any(text.startswith("Data in ") for text in reporter.texts())
        assert not any(text.startswith("Total fragmented tables") for text in reporter.texts())
        assert "InnoDB Engine Installed" in reporter.texts(tuner.Status.PASS)


class TestClosedStdin:
    def test_remote_memory_assumes_this_computer(self, data_access, system_info, reporter, option):
        def ask(question):
            raise EOFError("EOF when reading a line")

        server = tuner.ServerSnapshot(host="db.example.com", password="secret")
        assert run(server, data_access, system_info, system.OptionPrompt(option, ask=ask), reporter, option) is True
        assert server.physical_memory == 8 * GIBIBYTE
        assert server.swap_memory == 2 * GIBIBYTE
        assert "Assuming the same amount of physical memory as this computer" in reporter.texts(tuner.Status.INFO)


class TestReporterClosedDuringFailure:
    def test_failure_stops_silently(self, system_info, prompt, option):
        target = rp.CollectingReporter()
        queue_reporter = rp.QueueReporter(target)

        class ClosingDataAccess(FakeDataAccess):
            def load_snapshot(self, server):
                queue_reporter.close()
                raise errors.DataAccessError("Lost connection to MySQL server during query")

        data_access = ClosingDataAccess(HEALTHY_VARIABLES, HEALTHY_STATUS)
        server = tuner.ServerSnapshot(password="secret")
        assert run(server, data_access, system_info, prompt, queue_reporter, option) is False
        queue_reporter.drain()
        assert not any(event.level is tuner.Status.FAIL for event in target.events)
        assert target.progress == []
