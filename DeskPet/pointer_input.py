import pygame


class PointerInput:
    """Feeds pygame mouse events to a PetEngine, stamped with the pygame clock."""

    def __init__(self, engine, clock=None):
        self.engine = engine
        self.clock = clock or (lambda: pygame.time.get_ticks() / 1000.0)
        self.inside = False

    def now(self):
        return self.clock()

    def handle_event(self, event, now=None):
        """Returns True if the event was a pointer event the engine consumed."""
        now = self.now() if now is None else now
        engine = self.engine

        if event.type == pygame.MOUSEMOTION:
            x, y = event.pos
            if not self.inside:
                self.inside = True
                engine.pointer_enter(x, y, now)
            engine.pointer_move(x, y, now)
            return True

        if event.type == pygame.MOUSEBUTTONDOWN:
            if not engine.pet_rect.collidepoint(event.pos):
                return False
            if event.button == 1:
                engine.pointer_down(*event.pos, now)
                return True
            if event.button == 3:
                engine.set_menu_open(not engine.menu_open)
                return True
            return False

        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            engine.pointer_up(*event.pos, now)
            return True

        if event.type == pygame.WINDOWLEAVE:
            self.inside = False
            engine.pointer_leave(now)
            return True
        return False
