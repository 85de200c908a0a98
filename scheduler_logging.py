class LoggingFlags:
    """Switches for the simulator's console trace"""

    # Console flags
    MAIN_MENU = True
    RUN_SUMMARY = False

    # Scheduler internals
    SCHEDULE_STEPS = False
    FREQUENCY_DECISIONS = False
    ENERGY_CALCULATION = False

    @classmethod
    def _flag_names(cls):
        return [attr for attr in dir(cls) if not attr.startswith('_') and attr.isupper()]

    @classmethod
    def enable_all_debug(cls):
        """Enable all debug flags"""
        for attr in cls._flag_names():
            setattr(cls, attr, True)

    @classmethod
    def disable_all_debug(cls):
        """Disable all debug flags except the menu"""
        for attr in cls._flag_names():
            if attr != 'MAIN_MENU':
                setattr(cls, attr, False)

    @classmethod
    def set_production_mode(cls):
        """Menu and run summaries only"""
        cls.disable_all_debug()
        cls.MAIN_MENU = True
        cls.RUN_SUMMARY = True

    @classmethod
    def debug_enabled(cls) -> bool:
        return cls.SCHEDULE_STEPS or cls.FREQUENCY_DECISIONS or cls.ENERGY_CALCULATION


def log_if(flag: bool, message: str, *args, **kwargs):
    """Print message only if flag is True"""
    if flag:
        print(message, *args, **kwargs)
