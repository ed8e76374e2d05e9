"""Host configuration for running a CHIP-8 program."""

from chex import dataclass

from octavm.constants import PROGRAM_START
from octavm.rendering import create_color_scheme
from octavm.logging import ConsoleLogger


@dataclass(frozen=True)
class EmulatorConfig:
    """Settings the host loop uses to pace and present the machine.

    Attributes:
        instructions_per_frame: Steps executed per displayed frame (10 x 60fps
            approximates the 500-600Hz of CHIP-8 hardware)
        fps: Host frame rate
        scale: Window pixels per CHIP-8 pixel
        color_scheme: Name understood by ``create_color_scheme``
        load_address: Where the ROM is copied and execution starts
        seed: Seed of the random source used by CXNN
        log_level: Minimum level printed by the console loggers
        mute: Disable the beep while the sound timer runs
    """
    instructions_per_frame: int = 10
    fps: int = 60
    scale: int = 8
    color_scheme: str = "classic"
    load_address: int = PROGRAM_START
    seed: int = 0
    log_level: str = "INFO"
    mute: bool = False

    def validate(self) -> "EmulatorConfig":
        """Raise ValueError on settings the host cannot honour."""
        if self.instructions_per_frame < 1:
            raise ValueError(f"instructions_per_frame must be positive, got {self.instructions_per_frame}")
        if self.fps < 1:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.scale < 1:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if self.log_level.upper() not in ConsoleLogger.level_order:
            raise ValueError(f"Unknown log level '{self.log_level}'")
        create_color_scheme(self.color_scheme)
        return self
