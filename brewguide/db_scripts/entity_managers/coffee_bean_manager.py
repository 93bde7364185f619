##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Module for managing the coffee bean inventory.
"""

import logging
from typing import Dict, List, Optional

from brewguide.backends.sqlite.document_store import COFFEE_BEANS
from brewguide.db_scripts.data_models import CoffeeBeanModel
from brewguide.db_scripts.entity_managers.entity_manager import ALL_ENTRIES, EntityManager
from brewguide.exceptions import CoffeeBeanError
from brewguide.utils import current_millis, format_number, generate_record_id


LOG = logging.getLogger(__name__)

DEFAULT_ROAST_LEVEL = "浅度烘焙"  # light roast
DEFAULT_BEAN_TYPE = "filter"
ALL_BEANS_TTL = 300.0
SINGLE_BEAN_TTL = 600.0


class CoffeeBeanManager(EntityManager[CoffeeBeanModel]):
    """
    Manages the coffee bean inventory.

    While a batch operation is open, writes publish no `data:changed` events;
    a single event is published when the batch ends.

    Methods:
        get_all_beans: Retrieve every bean (fail soft).
        get_bean_by_id: Retrieve a bean by id (fail soft).
        get_bean_by_name: Retrieve a bean by exact name (fail soft).
        get_rated_beans: Retrieve every bean with a positive rating (fail soft).
        get_rated_beans_by_type: Retrieve rated beans of one type (fail soft).
        add_bean: Add a bean with a new id and timestamp.
        update_bean: Apply field updates to a bean.
        delete_bean: Delete a bean.
        update_bean_remaining: Subtract a used amount from a bean's remaining grams.
        update_bean_ratings: Update a bean's rating fields.
        start_batch_operation: Suspend change events.
        end_batch_operation: Resume change events and publish one.
    """

    collection_name = COFFEE_BEANS
    backup_key = COFFEE_BEANS
    model_class = CoffeeBeanModel
    error_class = CoffeeBeanError

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._batch = False

    def _read_all(self) -> List[CoffeeBeanModel]:
        self.coordinator.ensure_migrated()
        beans = self.cache.resolve(ALL_ENTRIES, self._load_all, ALL_BEANS_TTL)
        return [bean.copy() for bean in beans]

    def _store(self, bean: CoffeeBeanModel, beans: List[CoffeeBeanModel]):
        self.writer.put(COFFEE_BEANS, bean.to_dict(), self.backup_key, self._backup_value(beans), notify=not self._batch)
        self.invalidate()

    def get_all_beans(self) -> List[CoffeeBeanModel]:
        """
        Retrieve every bean.

        Returns:
            The beans; empty if none are stored or the read failed.
        """
        return self.get_all()

    def get_bean_by_id(self, bean_id: str) -> Optional[CoffeeBeanModel]:
        """
        Retrieve a bean by id.

        Args:
            bean_id: The id of the bean.

        Returns:
            The bean, or None.
        """

        def read():
            self.coordinator.ensure_migrated()

            def load():
                record = self.collection.get(bean_id)
                return CoffeeBeanModel.from_dict(record) if record is not None else None

            bean = self.cache.resolve(f"bean:{bean_id}", load, SINGLE_BEAN_TTL)
            return bean.copy() if bean is not None else None

        return self._soft_read(f"coffee bean '{bean_id}'", read, None)

    def get_bean_by_name(self, name: str) -> Optional[CoffeeBeanModel]:
        """
        Retrieve the first bean called `name`.

        Args:
            name: The exact name of the bean.

        Returns:
            The bean, or None.
        """
        return next((bean for bean in self.get_all_beans() if bean.name == name), None)

    def get_rated_beans(self) -> List[CoffeeBeanModel]:
        """
        Retrieve every bean that has a positive overall rating.

        Returns:
            The rated beans.
        """
        return [bean for bean in self.get_all_beans() if bean.overall_rating and bean.overall_rating > 0]

    def get_rated_beans_by_type(self, bean_type: str) -> List[CoffeeBeanModel]:
        """
        Retrieve rated beans of one type.

        Args:
            bean_type: Either `espresso` or `filter`.

        Returns:
            The rated beans of that type.
        """
        return [bean for bean in self.get_rated_beans() if bean.bean_type == bean_type]

    def add_bean(self, bean: CoffeeBeanModel) -> CoffeeBeanModel:
        """
        Add a bean. A new id and the current timestamp are assigned, and the
        roast level defaults to light roast.

        Args:
            bean: The bean to add. Its id and timestamp are ignored.

        Returns:
            A copy of the bean as stored.

        Raises:
            CoffeeBeanError: If the bean could not be written.
        """
        bean = bean.copy()
        bean.id = generate_record_id()
        bean.timestamp = current_millis()
        if not bean.roast_level:
            bean.roast_level = DEFAULT_ROAST_LEVEL
        try:
            beans = self._read_all()
            beans.append(bean)
            self._store(bean, beans)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed("Failed to add coffee bean", exc)
        LOG.debug(f"Added coffee bean '{bean.id}'.")
        return bean.copy()

    def update_bean(self, bean_id: str, updates: Dict) -> Optional[CoffeeBeanModel]:
        """
        Apply `updates` to a bean. The id never changes and the timestamp is
        set to now.

        Args:
            bean_id: The id of the bean.
            updates: Field name (or JSON key) to new value.

        Returns:
            A copy of the updated bean, or None if no bean has that id.

        Raises:
            CoffeeBeanError: If the bean could not be written.
        """
        try:
            beans = self._read_all()
            bean = next((stored for stored in beans if stored.id == bean_id), None)
            if bean is None:
                return None
            bean.update_fields(updates)
            bean.timestamp = current_millis()
            self._store(bean, beans)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to update coffee bean '{bean_id}'", exc)
        return bean.copy()

    def delete_bean(self, bean_id: str) -> bool:
        """
        Delete a bean.

        Args:
            bean_id: The id of the bean.

        Returns:
            True if a bean was deleted, False if none had that id.

        Raises:
            CoffeeBeanError: If the deletion could not be written.
        """
        try:
            beans = self._read_all()
            remaining = [bean for bean in beans if bean.id != bean_id]
            if len(remaining) == len(beans):
                return False
            self.writer.delete(
                COFFEE_BEANS, bean_id, self.backup_key, self._backup_value(remaining), notify=not self._batch
            )
            self.invalidate()
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to delete coffee bean '{bean_id}'", exc)
        return True

    def delete(self, identifier: str) -> bool:
        return self.delete_bean(identifier)

    def update_bean_remaining(self, bean_id: str, used_amount: float) -> Optional[CoffeeBeanModel]:
        """
        Subtract `used_amount` grams from a bean's remaining amount, never going below zero.

        Args:
            bean_id: The id of the bean.
            used_amount: Grams used; must be positive.

        Returns:
            A copy of the updated bean, or None if the bean is unknown or the
            amount is not positive.
        """
        if not bean_id or used_amount is None or used_amount <= 0:
            return None
        bean = self.get_bean_by_id(bean_id)
        if bean is None:
            return None
        try:
            current = float(bean.remaining) if bean.remaining else 0.0
        except ValueError:
            LOG.warning(f"Coffee bean '{bean_id}' has a non-numeric remaining amount '{bean.remaining}'.")
            current = 0.0
        return self.update_bean(bean_id, {"remaining": format_number(max(0.0, current - used_amount))})

    def update_bean_ratings(self, bean_id: str, ratings: Dict) -> Optional[CoffeeBeanModel]:
        """
        Update a bean's rating fields. A positive overall rating without a bean
        type marks the bean as a filter bean.

        Args:
            bean_id: The id of the bean.
            ratings: Rating fields to update (e.g. `overallRating`, `ratingNotes`).

        Returns:
            A copy of the updated bean, or None if no bean has that id.

        Raises:
            CoffeeBeanError: If the bean could not be written.
        """
        ratings = dict(ratings)
        rating_key = "overall_rating" if "overall_rating" in ratings else "overallRating"
        overall = ratings.get(rating_key)
        if overall is not None:
            try:
                # Imported JSON may carry the rating as a string
                overall = ratings[rating_key] = float(overall)
            except (TypeError, ValueError) as exc:
                self._write_failed(f"Failed to rate coffee bean '{bean_id}'", exc)
        if overall is not None and overall > 0 and not (ratings.get("beanType") or ratings.get("bean_type")):
            ratings["beanType"] = DEFAULT_BEAN_TYPE
        return self.update_bean(bean_id, ratings)

    def start_batch_operation(self):
        """
        Suspend `data:changed` events until `end_batch_operation` is called.
        """
        self._batch = True

    def end_batch_operation(self):
        """
        Resume `data:changed` events and publish one for the whole batch.
        """
        self._batch = False
        self.writer.notify(COFFEE_BEANS)
