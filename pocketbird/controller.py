"""
The creature controller: one bird, everything it owns, and its two ticks.

Host code builds a controller once (``build_controller``), pushes input
events onto it as they happen, and calls ``logic_tick``/``paint_tick`` from
the tick driver. Each paint tick returns where the host should place the
sprite canvas.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np

from .collectibles import FeatherDrop, HatDrop, choose_hat_to_unlock, choose_species_to_unlock
from .core.clock import now_ms
from .core.config import BirbConfig
from .core.events import (
    FeatherClicked,
    HatClicked,
    InputEvent,
    InputQueue,
    MenuClosed,
    PointerClick,
    PointerOver,
    SetVisible,
    ToggleFreeze,
    TouchMove,
    UserActivity,
)
from .core.geometry import Direction
from .core.palette import Variant
from .core.save_data import MemorySaveStore, SaveData, SaveStore
from .elements.registry import SpeciesRegistry
from .host import HostAdapter, normalize_path
from .movement.oracle import LayoutOracle
from .movement.planner import MovementPlanner, State
from .sprites.animation import Animation
from .sprites.bird import Animations, BirdSprite, build_feather_animation
from .sprites.canvas import PixelCanvas
from .sprites.hats import HATS, ITEM_SIZE, NO_HAT, HatInfo, build_hat_item_animation
from .sprites.sheet import BIRD_SHEET, FEATHER_SHEET, HATS_SHEET, load_sheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """Where the host should put the sprite canvas this frame.

    ``left`` and ``bottom`` are host pixels. ``absolute`` means the bird is
    anchored to page content rather than fixed to the viewport.
    """
    left: float
    bottom: float
    absolute: bool
    direction: Direction


class CreatureController:
    """Owns the planner, the sprite, the active species, the worn hat and
    persisted state."""

    def __init__(
        self,
        sprite: BirdSprite,
        planner: MovementPlanner,
        registry: SpeciesRegistry,
        host: HostAdapter,
        save_store: Optional[SaveStore] = None,
        config: Optional[BirbConfig] = None,
        feather_animation: Optional[Animation] = None,
        hat_sheet: Optional[np.ndarray] = None,
        rng: Optional[random.Random] = None,
        on_menu_open: Optional[Callable[[], None]] = None,
        on_chirp: Optional[Callable[[], None]] = None,
        on_unlock: Optional[Callable[[Variant], None]] = None,
        on_hat_unlock: Optional[Callable[[HatInfo], None]] = None,
        on_path_change: Optional[Callable[[str], None]] = None,
    ):
        self.sprite = sprite
        self.planner = planner
        self.registry = registry
        self.host = host
        self.save_store = save_store or MemorySaveStore()
        self.config = config or planner.config
        self.feather_animation = feather_animation
        self.hat_sheet = hat_sheet
        self.rng = rng or planner.rng
        self.on_menu_open = on_menu_open
        self.on_chirp = on_chirp
        self.on_unlock = on_unlock
        self.on_hat_unlock = on_hat_unlock
        self.on_path_change = on_path_change

        self.events = InputQueue()
        self.visible = True
        self.menu_open = False
        self.ticks = 0
        self.last_pet: Optional[float] = None
        self.pet_stack: deque[float] = deque(maxlen=self.config.timing.pet_stack_size)
        self.feather: Optional[FeatherDrop] = None
        self.feather_canvas: Optional[PixelCanvas] = None
        self.hat: Optional[HatDrop] = None
        self.hat_canvas: Optional[PixelCanvas] = None
        self._last_path = normalize_path(host.get_path())

        self.save_data = SaveData()
        self.variant = registry.get(registry.default_id)
        self.load()

        planner.on_state_change = self._on_state_change

    @classmethod
    def create(
        cls,
        host: HostAdapter,
        layout: LayoutOracle,
        config: Optional[BirbConfig] = None,
        save_store: Optional[SaveStore] = None,
        registry: Optional[SpeciesRegistry] = None,
        sheet_path: Union[str, Path] = BIRD_SHEET,
        feather_path: Optional[Union[str, Path]] = FEATHER_SHEET,
        hats_path: Optional[Union[str, Path]] = HATS_SHEET,
        rng: Optional[random.Random] = None,
        now: Optional[float] = None,
        **callbacks,
    ) -> "CreatureController":
        """Load assets and species, build the bird and put it on a perch.

        Raises:
            PocketBirdError: any construction failure (missing sheet,
                malformed frames, unknown default species); nothing is
                half-built.
        """
        config = config or BirbConfig()
        rng = rng or random.Random()
        now = now_ms() if now is None else now
        display = config.display

        if registry is None:
            registry = SpeciesRegistry()
            registry.load_all()

        hat_sheet = load_sheet(hats_path, literal_colors=True) if hats_path is not None else None
        sprite = BirdSprite(
            load_sheet(sheet_path),
            sprite_width=display.sprite_width,
            sprite_height=display.sprite_height,
            canvas_pixel_size=display.canvas_pixel_size,
            now=now,
            hat_sheet=hat_sheet,
        )
        feather_animation = None
        if feather_path is not None:
            feather_animation = build_feather_animation(load_sheet(feather_path), display.feather_width)

        planner = MovementPlanner(
            layout,
            config,
            rng=rng,
            focus_top_margin=max(host.get_focus_top_margin(), display.focus_top_margin),
            touch=host.is_touch_device(),
            now=now,
        )
        controller = cls(
            sprite,
            planner,
            registry,
            host,
            save_store=save_store,
            config=config,
            feather_animation=feather_animation,
            hat_sheet=hat_sheet,
            rng=rng,
            **callbacks,
        )
        if config.default_species:
            if config.default_species in registry:
                controller.unlock_species(config.default_species)
                controller.switch_variant(config.default_species)
            else:
                logger.warning("Unknown species '%s', keeping %s", config.default_species, controller.variant.id)
        sprite.set_animation(Animations.BOB, now)
        planner.focus_on_element(now, teleport=True)
        logger.info("Bird ready as %s", controller.variant.name)
        return controller

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Read save data and apply the saved species."""
        data = self.save_store.load()
        data.unlocked_species = [s for s in data.unlocked_species if s in self.registry]
        if not data.unlocked_species:
            data.unlocked_species = [self.registry.default_id]
        if data.current_species not in data.unlocked_species:
            data.current_species = data.unlocked_species[0]
        data.unlocked_hats = [h for h in data.unlocked_hats if h in HATS]
        if NO_HAT not in data.unlocked_hats:
            data.unlocked_hats.insert(0, NO_HAT)
        if data.current_hat not in data.unlocked_hats:
            data.current_hat = NO_HAT
        self.save_data = data
        self._apply_variant(self.registry.get(data.current_species))
        logger.info(
            "Loaded save: %d species, %d hats unlocked",
            len(data.unlocked_species),
            len(data.unlocked_hats),
        )

    def save(self) -> None:
        self.save_store.save(self.save_data)

    def reset_save_data(self) -> None:
        self.save_store.reset()
        self.load()

    # ------------------------------------------------------------------
    # Species
    # ------------------------------------------------------------------

    def switch_variant(self, species_id: str) -> bool:
        """Change the bird's species. Locked species are refused."""
        if species_id not in self.save_data.unlocked_species:
            logger.warning("Species '%s' is not unlocked", species_id)
            return False
        self._apply_variant(self.registry.get(species_id))
        self.save_data.current_species = species_id
        self.save()
        return True

    def _apply_variant(self, variant: Variant) -> None:
        self.variant = variant
        # palette swaps change pixels without changing frame or facing
        self.sprite.invalidate()

    def unlock_species(self, species_id: str) -> bool:
        """Unlock *species_id*. Returns False if it was already unlocked."""
        variant = self.registry.get(species_id)
        if not self.save_data.unlock(species_id):
            return False
        self.save()
        logger.info("Unlocked %s", variant.name)
        if self.on_unlock is not None:
            self.on_unlock(variant)
        return True

    def unlock_all(self) -> None:
        """Unlock every species and every hat."""
        for species_id in self.registry.ids():
            self.unlock_species(species_id)
        for hat_id in HATS:
            self.unlock_hat(hat_id)

    @property
    def theme_highlight(self) -> Optional[str]:
        return self.variant.theme_highlight

    def display_name(self, invert: bool = False) -> str:
        """Bird or Birb, depending on birb mode."""
        return "Birb" if self.save_data.settings.birb_mode != invert else "Bird"

    def toggle_birb_mode(self) -> bool:
        settings = self.save_data.settings
        settings.birb_mode = not settings.birb_mode
        self.save()
        return settings.birb_mode

    def toggle_sound(self) -> bool:
        settings = self.save_data.settings
        settings.sound_enabled = not settings.sound_enabled
        self.save()
        return settings.sound_enabled

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def push(self, event: InputEvent) -> None:
        """Queue a host event; it's applied on the next logic tick."""
        self.events.push(event)

    def _handle(self, event: InputEvent) -> None:
        if isinstance(event, UserActivity):
            self.planner.note_activity(event.now)
        elif isinstance(event, PointerOver):
            self._on_hover(event.now)
        elif isinstance(event, TouchMove):
            self.pet(event.now)
        elif isinstance(event, PointerClick):
            self._on_click(event.now)
        elif isinstance(event, MenuClosed):
            self.menu_open = False
        elif isinstance(event, SetVisible):
            self.set_visible(event.visible)
        elif isinstance(event, ToggleFreeze):
            self.planner.toggle_freeze()
        elif isinstance(event, FeatherClicked):
            self.collect_feather()
        elif isinstance(event, HatClicked):
            self.collect_hat()
        else:
            logger.warning("Ignoring unknown event %r", event)

    def _on_hover(self, now: float) -> None:
        self.planner.note_activity(now)
        if self.planner.mode != State.IDLE:
            return
        timing = self.config.timing
        self.pet_stack.append(now)
        recent = sum(1 for t in self.pet_stack if now - t < timing.pet_hover_window)
        if recent >= timing.pet_hover_count:
            self.pet(now)
            self.pet_stack.clear()

    def _on_click(self, now: float) -> None:
        self.planner.note_activity(now)
        if (
            self.sprite.current_animation == Animations.HEART
            and self.last_pet is not None
            and now - self.last_pet < self.config.timing.pet_menu_cooldown
        ):
            # still being pet
            return
        self.menu_open = True
        if self.on_menu_open is not None:
            self.on_menu_open()

    def set_visible(self, visible: bool) -> None:
        if visible != self.visible:
            logger.info("Bird %s", "shown" if visible else "hidden")
        self.visible = visible

    # ------------------------------------------------------------------
    # Petting
    # ------------------------------------------------------------------

    def pet(self, now: float) -> bool:
        """Play the heart reaction if the bird is sitting still."""
        if self.planner.mode != State.IDLE or self.sprite.current_animation == Animations.HEART:
            return False
        if self.save_data.settings.sound_enabled and self.on_chirp is not None:
            self.on_chirp()
        self.sprite.set_animation(Animations.HEART, now)
        self.last_pet = now
        return True

    def is_pet_boost_active(self, now: float) -> bool:
        return self.last_pet is not None and now - self.last_pet < self.config.timing.pet_boost_duration

    # ------------------------------------------------------------------
    # Feathers
    # ------------------------------------------------------------------

    def activate_feather(self, now: float) -> Optional[FeatherDrop]:
        """Drop a feather of a still-locked species, if there is one and none is falling."""
        if self.feather is not None:
            return None
        species_id = choose_species_to_unlock(
            self.registry.ids(), self.save_data.unlocked_species, self.rng
        )
        if species_id is None:
            return None
        display = self.config.display
        size = display.feather_width * display.canvas_pixel_size
        self.feather = FeatherDrop.spawn(species_id, self.planner.oracle.viewport(), size, self.rng)
        if self.feather_animation is not None:
            self.feather_canvas = PixelCanvas(size, size)
            self.feather_animation.draw(
                self.feather_canvas,
                Direction.LEFT,
                now,
                display.canvas_pixel_size,
                self.registry.get(species_id),
                now=now,
            )
        return self.feather

    def collect_feather(self) -> Optional[str]:
        """Pick up the falling feather and unlock its species."""
        if self.feather is None:
            return None
        species_id = self.feather.species_id
        self.feather = None
        self.feather_canvas = None
        self.unlock_species(species_id)
        return species_id

    def _maybe_drop_feather(self, now: float) -> None:
        timing = self.config.timing
        if not self.visible or now - self.planner.last_action >= timing.super_afk_time:
            return
        chance = timing.feather_chance
        if self.is_pet_boost_active(now):
            chance *= timing.feather_boost
        if self.rng.random() < chance:
            self.last_pet = None
            self.activate_feather(now)

    # ------------------------------------------------------------------
    # Hats
    # ------------------------------------------------------------------

    @property
    def current_hat(self) -> str:
        return self.save_data.current_hat

    @property
    def hat_info(self) -> HatInfo:
        return HATS[self.save_data.current_hat]

    def switch_hat(self, hat_id: str) -> bool:
        """Wear *hat_id*. Locked hats are refused."""
        if hat_id not in self.save_data.unlocked_hats:
            logger.warning("Hat '%s' is not unlocked", hat_id)
            return False
        self.save_data.current_hat = hat_id
        self.save()
        return True

    def unlock_hat(self, hat_id: str) -> bool:
        """Unlock *hat_id* and put it on. Returns False if unknown or already unlocked."""
        if hat_id not in HATS:
            logger.warning("Unknown hat '%s'", hat_id)
            return False
        if not self.save_data.unlock_hat(hat_id):
            return False
        self.switch_hat(hat_id)
        logger.info("Unlocked %s", HATS[hat_id].name)
        if self.on_hat_unlock is not None:
            self.on_hat_unlock(HATS[hat_id])
        return True

    def activate_hat(self, now: float) -> Optional[HatDrop]:
        """Leave a locked hat on top of a random landable element.

        Nothing happens while a hat is already waiting, when every hat is
        unlocked, or when no element qualifies.
        """
        if self.hat is not None:
            return None
        hat_id = choose_hat_to_unlock(self.save_data.unlocked_hats, self.rng)
        if hat_id is None:
            return None
        element = self.planner.pick_focus_candidate()
        if element is None:
            return None
        oracle = self.planner.oracle
        rect = oracle.bounding_rect(element)
        if rect is None:
            return None
        pixel_size = self.config.display.canvas_pixel_size
        size = ITEM_SIZE * pixel_size
        self.hat = HatDrop.place(hat_id, rect, size, oracle.scroll_y())
        if self.hat_sheet is not None:
            self.hat_canvas = PixelCanvas(size, size)
            build_hat_item_animation(self.hat_sheet, hat_id).draw(
                self.hat_canvas, Direction.LEFT, now, pixel_size, self.variant, now=now
            )
        return self.hat

    def collect_hat(self) -> Optional[str]:
        """Pick up the waiting hat, unlock it and wear it."""
        if self.hat is None:
            return None
        hat_id = self.hat.hat_id
        self.hat = None
        self.hat_canvas = None
        self.unlock_hat(hat_id)
        return hat_id

    def _maybe_drop_hat(self, now: float) -> None:
        timing = self.config.timing
        if not self.visible or now - self.planner.last_action >= timing.super_afk_time:
            return
        chance = timing.hat_chance
        if self.is_pet_boost_active(now):
            chance *= timing.pet_hat_boost
        if self.rng.random() < chance:
            self.last_pet = None
            self.activate_hat(now)

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def logic_tick(self, now: Optional[float] = None) -> None:
        """Fixed-rate update: apply input, decide, drop and move collectibles.

        A hidden bird stays where it is: a hop in progress ends on the spot
        and no new hop or flight starts until it is shown again.
        """
        now = now_ms() if now is None else now
        self.ticks += 1
        for event in self.events.drain():
            self._handle(event)

        if not self.visible:
            self.planner.settle(now)
        self.planner.logic_tick(
            now,
            busy=self.menu_open or not self.visible,
            happy=self.sprite.current_animation == Animations.HEART,
        )
        self._maybe_drop_feather(now)
        self._maybe_drop_hat(now)

        if self.feather is not None:
            self.feather.fall(
                self.planner.oracle.viewport(), self.ticks, self.config.timing.feather_fall_speed
            )

    def paint_tick(self, now: Optional[float] = None) -> Optional[Placement]:
        """Display-rate update. Returns None while the bird is hidden."""
        if not self.visible:
            return None
        now = now_ms() if now is None else now
        self.planner.paint_tick(now)
        self.sprite.direction = self.planner.state.direction
        if self.sprite.draw(self.variant, now, hat=self.current_hat):
            self.sprite.set_animation(Animations.STILL, now)
        return self.placement()

    def placement(self) -> Placement:
        state = self.planner.state
        display = self.config.display
        width = self.sprite.canvas.width * display.css_scale
        offset = display.window_pixel_size * (2 if state.direction == Direction.RIGHT else -2)
        absolute = self.planner.is_absolute
        bottom = state.y - self.planner.oracle.scroll_y() if absolute else state.y
        return Placement(
            left=state.x - width / 2 - offset,
            bottom=bottom,
            absolute=absolute,
            direction=state.direction,
        )

    def check_path(self) -> bool:
        """Notice host navigation. Returns True when the page path changed."""
        path = normalize_path(self.host.get_path())
        if path == self._last_path:
            return False
        logger.info("Path changed from '%s' to '%s'", self._last_path, path)
        self._last_path = path
        if self.on_path_change is not None:
            self.on_path_change(path)
        return True

    def _on_state_change(self, mode: State, now: float) -> None:
        if mode == State.IDLE:
            self.sprite.set_animation(Animations.BOB, now)
        else:
            self.sprite.set_animation(Animations.FLYING, now)


def build_controller(
    host: HostAdapter,
    layout: LayoutOracle,
    config: Optional[BirbConfig] = None,
    **kwargs,
) -> CreatureController:
    """Build a ready-to-tick controller. Construction errors propagate."""
    return CreatureController.create(host, layout, config, **kwargs)
