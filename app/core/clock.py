from datetime import date, datetime


class Clock:
    """Источник текущего времени (UTC, naive) для всех сервисов.

    В тестах подменяется фиксированными часами через get_clock.
    """

    def now(self) -> datetime:
        return datetime.utcnow()

    def today(self) -> date:
        return self.now().date()


system_clock = Clock()


def get_clock() -> Clock:
    return system_clock
