# pyglet host for the interpreter.
# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and Overriding whatever def we need from there. The core in cpu.py only exposes
# its framebuffer, key cells and timers - everything about time and pixels lives here.

import random

import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from .config import CPU_HZ, HEIGHT, SCALE, TIMER_HZ, WIDTH
from .host import KEY_LAYOUT, Runner

#map binding keys
KEYMAP = {getattr(key, name): chip8_key for name, chip8_key in KEY_LAYOUT.items()}

WHITE = (255, 255, 255, 255)


class Chip8Window(pyglet.window.Window):

    def __init__(self, chip8, scale=SCALE, cpu_hz=CPU_HZ, timer_hz=TIMER_HZ, caption="CHIP-8 Emulator"):
        super().__init__(WIDTH * scale, HEIGHT * scale, caption=caption, resizable=False, vsync=False)

        self.chip8 = chip8
        self.runner = Runner(chip8, cpu_hz=cpu_hz, scale=scale)
        self.has_exit = False

        self.image = pyglet.image.ImageData(self.width, self.height, 'RGBA', self.runner.frame())

        # ---- Performance Counters ----
        self._fps_counter = 0
        self._bench_cycles = chip8.cycles
        self.fps_label = pyglet.text.Label("FPS: 0", font_size=12, x=5, y=self.height - 15,
                                           anchor_x='left', anchor_y='center', color=WHITE)
        self.cps_label = pyglet.text.Label("Cycles/s: 0", font_size=12, x=5, y=self.height - 30,
                                           anchor_x='left', anchor_y='center', color=WHITE)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

        # Schedule CPU and (when the core doesn't own them) timer ticks
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / cpu_hz)
        if not chip8.timers_per_step:
            pyglet.clock.schedule_interval(self._timer_tick, 1.0 / timer_hz)

        self.sound_playing = False

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        if self.has_exit:
            return
        frame = self.runner.tick(dt)
        if self.runner.halted:
            self.dispatch_event("on_close")
            return
        if frame is not None:
            self.image.set_data('RGBA', self.width * 4, frame)
        self._update_sound()

    # ---- timers ----
    def _timer_tick(self, dt):
        self.chip8.tick_timers()

    # ---- sound ----
    def _update_sound(self):
        if self.chip8.sound_active and not self.sound_playing:
            self._play_beep()

    def _play_beep(self, base_freq=440, duration=0.2, pitch_variation=15):
        freq = base_freq + random.randint(-pitch_variation, pitch_variation)
        wave = synthesis.Sine(duration=duration, frequency=freq, sample_rate=44100)

        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        # Ensure the sound stops after the requested duration
        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos

    # FPS / CPS
    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {int((self.chip8.cycles - self._bench_cycles) / dt)}"
        self._fps_counter = 0
        self._bench_cycles = self.chip8.cycles

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        self.image.blit(0, 0)
        self.fps_label.draw()
        self.cps_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.dispatch_event("on_close")
        elif symbol == key.F1:
            self.chip8.logs_on = not self.chip8.logs_on
            print("logsOn:", self.chip8.logs_on)
        elif symbol in KEYMAP:
            self.chip8.set_key(KEYMAP[symbol])

    def on_key_release(self, symbol, modifiers):
        if symbol in KEYMAP:
            self.chip8.release_key(KEYMAP[symbol])

    def on_close(self):
        self.has_exit = True
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._timer_tick)
        pyglet.clock.unschedule(self._update_bench)
        super().on_close()


def run(chip8, **kwargs):
    Chip8Window(chip8, **kwargs)
    pyglet.app.run()
