"""Menu management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from takeaway.domain import takeaway
from takeaway.menu.dish import Dish, find_dish

logger = structlog.get_logger(__name__)


@takeaway.command(part_of="Dish")
class AddDish:
    name = String(required=True, max_length=255)
    price = String(required=True, max_length=20)
    category = String(max_length=100)
    image = String(max_length=500)
    description = Text()
    is_available = Boolean(default=True)


@takeaway.command(part_of="Dish")
class SetDishAvailability:
    dish_id = Identifier(required=True)
    is_available = Boolean(required=True)


@takeaway.command_handler(part_of=Dish)
class ManageMenuHandler:
    @handle(AddDish)
    def add_dish(self, command):
        dish = Dish.create(
            name=command.name,
            price=command.price,
            category=command.category,
            image=command.image,
            description=command.description,
            is_available=command.is_available,
        )
        current_domain.repository_for(Dish).add(dish)
        logger.info("Dish added to menu", dish_id=str(dish.id), name=dish.name, price=dish.price)
        return str(dish.id)

    @handle(SetDishAvailability)
    def set_availability(self, command):
        dish = find_dish(command.dish_id)
        dish.is_available = command.is_available
        current_domain.repository_for(Dish).add(dish)
        logger.info("Dish availability changed", dish_id=str(dish.id), is_available=dish.is_available)
