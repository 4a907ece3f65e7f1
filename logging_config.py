class LoggingFlags:
    """Console logging switches for power profile computations"""

    # Main execution flags
    PROFILE_PROGRESS = False
    SOLUTION_ANALYSIS = True
    LOADING = False

    # Input checks (overlapping tasks and the like)
    VALIDATION_CHECKS = True

    # Profile construction flags
    DISTRIBUTION_DETAILS = False
    TRAVERSAL_DETAILS = False
    PARTITION_DETAILS = False
    SAMPLING_DETAILS = False
    PROGRESS_DETAILS = False

    @classmethod
    def names(cls):
        return [attr for attr in dir(cls) if not attr.startswith('_') and attr.isupper()]

    @classmethod
    def configure(cls, **flags):
        """Set several flags at once, e.g. configure(PARTITION_DETAILS=True)"""
        for name, value in flags.items():
            if name not in cls.names():
                raise ValueError(f"Unknown logging flag: {name}")
            setattr(cls, name, bool(value))

    @classmethod
    def enable_all_debug(cls):
        """Turn every flag on"""
        cls.configure(**{name: True for name in cls.names()})

    @classmethod
    def disable_all_debug(cls):
        """Turn every flag off except profile progress"""
        cls.configure(**{name: False for name in cls.names() if name != 'PROFILE_PROGRESS'})

    @classmethod
    def set_production_mode(cls):
        """Keep only validation warnings and result summaries"""
        cls.disable_all_debug()
        cls.configure(PROFILE_PROGRESS=False, VALIDATION_CHECKS=True, SOLUTION_ANALYSIS=True)


def log_if(flag: bool, message: str, *args, **kwargs):
    """Print message only if flag is True"""
    if flag:
        print(message, *args, **kwargs)
