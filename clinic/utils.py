import datetime


def to_naive_local(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value

    return value.astimezone().replace(tzinfo=None)


def start_of_day(value: datetime.datetime) -> datetime.datetime:
    return datetime.datetime.combine(value.date(), datetime.time.min)
