"""
Run a CHIP-8 program in a pygame window, or headless in the terminal.
"""

import argparse
import sys

import numpy as np
import pygame
from tqdm import tqdm

from octavm import (
    InvalidProgramError, KeyRandomSource, chip8_display_to_rgb, chip8_display_to_text,
    create_color_scheme, create_state, load_rom, save_screenshot, set_key, sound_active, step
)
from octavm.config import EmulatorConfig
from octavm.constants import SCREEN_HEIGHT, SCREEN_WIDTH
from octavm.logging import format_registers, get_logger, set_log_level

logger = get_logger("octavm.main")

# Number row plus WASD as the arrow keys of the hex keypad
KEY_MAP = {
    pygame.K_0: 0x0, pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3,
    pygame.K_4: 0x4, pygame.K_5: 0x5, pygame.K_6: 0x6, pygame.K_7: 0x7,
    pygame.K_8: 0x8, pygame.K_9: 0x9,
    pygame.K_w: 0x2, pygame.K_s: 0x8, pygame.K_a: 0x4, pygame.K_d: 0x6,
    pygame.K_z: 0xA, pygame.K_x: 0xB, pygame.K_c: 0xC,
    pygame.K_v: 0xD, pygame.K_b: 0xE, pygame.K_n: 0xF,
}

BEEP_FREQUENCY = 440
BEEP_SAMPLE_RATE = 22050


def make_beep():
    """Square wave tone played while the sound timer is running."""
    period = BEEP_SAMPLE_RATE // BEEP_FREQUENCY
    wave = np.where(np.arange(BEEP_SAMPLE_RATE) % period < period // 2, 4096, -4096).astype(np.int16)
    return pygame.sndarray.make_sound(np.column_stack((wave, wave)))


def advance_frame(state, rng, steps):
    """Run one frame of steps. Returns the last good state and whether the program halted."""
    try:
        for _ in range(steps):
            state = step(state, rng)
    except InvalidProgramError as error:
        logger.error(f"Program halted: {error}")
        logger.info(format_registers(state))
        return state, True
    return state, False


def run_emulator(rom_filename, config: EmulatorConfig):
    """Main emulator loop."""
    pygame.init()
    scale = config.scale
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption(f"octavm - {rom_filename}")
    clock = pygame.time.Clock()
    on_color, off_color = create_color_scheme(config.color_scheme)

    beep = None
    if not config.mute:
        pygame.mixer.init(frequency=BEEP_SAMPLE_RATE, size=-16, channels=2)
        beep = make_beep()

    rng = KeyRandomSource(config.seed)
    state = load_rom(create_state(load_address=config.load_address), rom_filename, config.load_address)

    running = True
    paused = False
    # Set once a fatal error stops the program; unpausing does not clear it
    halted = False
    beeping = False

    logger.info("Controls: ESC/Q=Quit, P=Pause, keypad on 0-9, WASD and ZXCVBN")

    try:
        while running:
            clock.tick(config.fps)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key in (pygame.K_ESCAPE, pygame.K_q):
                        running = False
                    elif event.key == pygame.K_p and not halted:
                        paused = not paused
                        logger.info("Paused" if paused else "Resumed")
                    elif event.key in KEY_MAP:
                        state = set_key(state, KEY_MAP[event.key], True)
                elif event.type == pygame.KEYUP:
                    if event.key in KEY_MAP:
                        state = set_key(state, KEY_MAP[event.key], False)

            if not paused and not halted:
                state, halted = advance_frame(state, rng, config.instructions_per_frame)

            if beep is not None:
                tone = sound_active(state) and not paused and not halted
                if tone and not beeping:
                    beep.play(loops=-1)
                    beeping = True
                elif not tone and beeping:
                    beep.stop()
                    beeping = False

            frame = chip8_display_to_rgb(state.display, scale, on_color, off_color)
            pygame.surfarray.blit_array(screen, frame.swapaxes(0, 1))
            pygame.display.flip()
    finally:
        pygame.quit()


def run_headless(rom_filename, steps, config: EmulatorConfig, screenshot=None):
    """Run a fixed number of steps without a window and print the final frame."""
    rng = KeyRandomSource(config.seed)
    state = load_rom(create_state(load_address=config.load_address), rom_filename, config.load_address)

    try:
        for _ in tqdm(range(steps), desc="Steps", unit="step"):
            state = step(state, rng)
    except InvalidProgramError as error:
        logger.error(f"Program halted: {error}")
        logger.info(format_registers(state))
        return 1
    finally:
        print(chip8_display_to_text(state.display))
        if screenshot:
            save_screenshot(state.display, screenshot, config.scale, config.color_scheme)
            logger.info(f"Saved screenshot to {screenshot}")

    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="CHIP-8 virtual machine")
    parser.add_argument("rom", help="ROM to execute (normally ending in .ch8)")
    parser.add_argument("--ipf", type=int, default=10, help="instructions per frame (default 10)")
    parser.add_argument("--fps", type=int, default=60, help="host frames per second (default 60)")
    parser.add_argument("--scale", type=int, default=8, help="window pixels per CHIP-8 pixel (default 8)")
    parser.add_argument("--color-scheme", default="classic", help="display colours (default classic)")
    parser.add_argument("--load-address", type=lambda value: int(value, 0), default=0x200,
                        help="address the ROM is loaded and started at (default 0x200)")
    parser.add_argument("--seed", type=int, default=0, help="seed for the random instruction")
    parser.add_argument("--log-level", default="INFO", help="DEBUG traces every instruction")
    parser.add_argument("--mute", action="store_true", help="disable the beep")
    parser.add_argument("--headless", type=int, metavar="STEPS",
                        help="run STEPS steps without a window and print the final frame")
    parser.add_argument("--screenshot", help="with --headless, save the final frame to this image file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = EmulatorConfig(
        instructions_per_frame=args.ipf,
        fps=args.fps,
        scale=args.scale,
        color_scheme=args.color_scheme,
        load_address=args.load_address,
        seed=args.seed,
        log_level=args.log_level,
        mute=args.mute,
    ).validate()
    set_log_level(config.log_level)

    if args.headless is not None:
        return run_headless(args.rom, args.headless, config, args.screenshot)

    run_emulator(args.rom, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
