#!/usr/bin/env python3
import logging

import pygame

from constants import FPS, LOG_LEVEL, SAVE_FILE, SCREEN_HEIGHT, SCREEN_WIDTH
from engine import PetEngine
from pointer_input import PointerInput
from save_store import JsonSaveStore

COLOR_BG = (40, 44, 52)
COLOR_PET = (171, 220, 255)
COLOR_TEXT = (230, 230, 230)
COLOR_BUBBLE = (255, 255, 255)

# key -> (interaction, magnitude, required item kind)
KEY_ACTIONS = {
    pygame.K_f: ('feed', 30, 'food'),
    pygame.K_c: ('clean', 30, 'cleaning_supply'),
    pygame.K_p: ('play', 20, 'toy'),
    pygame.K_t: ('train', 15, None),
    pygame.K_l: ('learn', 25, None),
    pygame.K_s: ('special', 15, None),
}
KEY_COMMANDS = {
    pygame.K_F12: 'take-photo',
    pygame.K_o: 'open-settings',
    pygame.K_m: 'minimize',
    pygame.K_ESCAPE: 'exit',
}

logger = logging.getLogger("deskpet")


class TextRenderer:
    """Debug stand-in for the real sprite renderer: draws the arbiter's choice as text."""

    def __init__(self, screen, font):
        self.screen = screen
        self.font = font
        self.expression = 'normal'
        self.animation = None
        self.status = None
        self.inventory = {}

    def __call__(self, expression, animation, status, inventory):
        self.expression = expression
        self.animation = animation
        self.status = status
        self.inventory = inventory

    def draw(self, pet_rect, toasts, status_change=None):
        self.screen.fill(COLOR_BG)
        pygame.draw.rect(self.screen, COLOR_PET, pet_rect, border_radius=12)
        label = self.font.render(self.expression, True, COLOR_BG)
        self.screen.blit(label, label.get_rect(center=pet_rect.center))
        if self.animation:
            anim = self.font.render(self.animation, True, COLOR_TEXT)
            self.screen.blit(anim, anim.get_rect(midtop=pet_rect.midbottom))

        if self.status is not None:
            s = self.status
            lines = [
                f"Lv {s.level}  exp {s.exp}",
                f"mood {s.mood:.0f}  clean {s.cleanliness:.0f}  hunger {s.hunger:.0f}  energy {s.energy:.0f}",
                "items: " + ", ".join(f"{k} x{v}" for k, v in self.inventory.items()),
            ]
            if status_change:
                lines[1] += f"  [{status_change}]"
            if s.bubble.active:
                lines.append(f"({s.bubble.text})")
            for i, line in enumerate(lines):
                self.screen.blit(self.font.render(line, True, COLOR_TEXT), (8, 8 + i * 18))

        for i, (text, _) in enumerate(toasts):
            surf = self.font.render(text, True, COLOR_BG)
            rect = surf.get_rect(midbottom=(SCREEN_WIDTH // 2, SCREEN_HEIGHT - 8 - i * 22))
            pygame.draw.rect(self.screen, COLOR_BUBBLE, rect.inflate(10, 4), border_radius=5)
            self.screen.blit(surf, rect)


class DeskPetApp:
    def __init__(self):
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("DeskPet")
        self.clock = pygame.time.Clock()
        self.renderer = TextRenderer(self.screen, pygame.font.Font(None, 20))
        self.toasts = []  # (text, expires_at)
        self.running = False
        self.engine = PetEngine(
            store=JsonSaveStore(SAVE_FILE),
            renderer=self.renderer,
            notify=self.add_toast,
            shell=self.handle_command,
        )
        self.pointer = PointerInput(self.engine)

    def add_toast(self, text, duration):
        self.toasts.append((text, self.pointer.now() + duration))

    def handle_command(self, name):
        if name == 'exit':
            self.running = False
        elif name == 'minimize':
            pygame.display.iconify()
        elif name == 'take-photo':
            pygame.image.save(self.screen, "deskpet_photo.png")
        elif name == 'open-settings':
            self.engine.set_menu_open(not self.engine.menu_open)

    def run(self):
        self.running = True
        self.engine.start(self.pointer.now())
        while self.running:
            self.clock.tick(FPS)
            now = self.pointer.now()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key in KEY_ACTIONS:
                        self.engine.interact(*KEY_ACTIONS[event.key], now=now)
                    elif event.key in KEY_COMMANDS:
                        self.engine.command(KEY_COMMANDS[event.key])
                else:
                    self.pointer.handle_event(event, now)

            frame = self.engine.poll(now)
            self.toasts = [(text, until) for text, until in self.toasts if until > now][-3:]
            self.renderer.draw(self.engine.pet_rect, self.toasts, frame.status_change if frame else None)
            pygame.display.flip()
        self.engine.stop()


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = DeskPetApp()
    try:
        app.run()
    except Exception:
        logger.exception("Error during run loop")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
