from typing import Generic, Iterable, Optional, Type, TypeVar

from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        return self.model.objects.filter(**filters)

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def update(self, obj: T, **data) -> T:
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save(update_fields=[*data.keys(), *self._touch_fields(obj)])
        return obj

    def delete(self, obj: T) -> None:
        obj.delete()

    def lock(self, **filters) -> Optional[T]:
        """Fetch a row with ``SELECT ... FOR UPDATE``; must run inside a transaction."""
        return self.model.objects.select_for_update().filter(**filters).first()

    def delete_where(self, **filters) -> int:
        """Delete matching rows and return how many rows of this model were removed."""
        _, per_model = self.model.objects.filter(**filters).delete()
        return per_model.get(self.model._meta.label, 0)

    @staticmethod
    def _touch_fields(obj: T):
        # auto_now columns are only written when listed in update_fields
        return [
            f.name
            for f in obj._meta.concrete_fields
            if getattr(f, "auto_now", False)
        ]
