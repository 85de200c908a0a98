from energy_scheduler import run_adaptive
from scheduler_logging import LoggingFlags, log_if


def test_log_if(capsys):
    log_if(False, "hidden")
    log_if(True, "shown", 1)
    assert capsys.readouterr().out == "shown 1\n"


def test_enable_and_disable():
    LoggingFlags.enable_all_debug()
    assert LoggingFlags.SCHEDULE_STEPS and LoggingFlags.ENERGY_CALCULATION
    assert LoggingFlags.debug_enabled()

    LoggingFlags.disable_all_debug()
    assert LoggingFlags.MAIN_MENU
    assert not LoggingFlags.RUN_SUMMARY
    assert not LoggingFlags.debug_enabled()


def test_production_mode():
    LoggingFlags.enable_all_debug()
    LoggingFlags.set_production_mode()
    assert LoggingFlags.MAIN_MENU and LoggingFlags.RUN_SUMMARY
    assert not LoggingFlags.FREQUENCY_DECISIONS


def test_scheduler_is_quiet_by_default(reference, capsys):
    LoggingFlags.disable_all_debug()
    run_adaptive(reference)
    assert capsys.readouterr().out == ""


def test_scheduler_trace(reference, capsys):
    LoggingFlags.enable_all_debug()
    run_adaptive(reference)
    out = capsys.readouterr().out
    assert "pid 1: remaining work 24 -> HIGH" in out
    assert "pid 4: remaining work 3 -> LOW" in out
    assert "makespan=34.00" in out
