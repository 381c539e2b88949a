from constants import BUBBLE_DURATION


class ThoughtBubble:
    """Drives the transient bubble stored on the pet status."""

    def __init__(self, status):
        self.status = status

    @property
    def active(self):
        return self.status.bubble.active

    def show_message(self, message, now, duration=BUBBLE_DURATION, kind='thought'):
        """Returns False if a different bubble is still on screen."""
        bubble = self.status.bubble
        if bubble.active and bubble.text != message and now < bubble.expiry:
            return False
        bubble.active = True
        bubble.text = message
        bubble.kind = kind
        bubble.expiry = now + duration
        return True

    def update(self, now):
        bubble = self.status.bubble
        if bubble.active and now >= bubble.expiry:
            bubble.active = False
            bubble.text = ""
