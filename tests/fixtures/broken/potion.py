from interface_shims import Event

from tests.fixtures.game.can_heal import CanHeal


class Potion:
    implements = [CanHeal]

    healed = Event("amount")

    def drink(self):
        return "glug"
