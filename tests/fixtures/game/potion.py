from interface_shims import Event

from tests.fixtures.game.can_heal import CanHeal


class Potion:
    implements = [CanHeal]

    healed = Event("amount")
    charges: int = 3

    def heal(self, amount):
        self.charges -= 1
        self.healed.emit(amount)
        return amount
