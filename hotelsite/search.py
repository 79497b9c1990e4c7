def matches_destination(hotel, destination):
    """True when the hotel's name or location contains ``destination``.

    Latin fields are compared case-insensitively; Arabic fields have no case,
    so they are matched as an exact substring.
    """
    needle = destination.casefold()
    for field in ('name', 'location'):
        if needle in (hotel.get(field) or '').casefold():
            return True
    for field in ('nameAr', 'locationAr'):
        if destination in (hotel.get(field) or ''):
            return True
    return False


def filter_by_destination(hotels, destination):
    if not destination or not destination.strip():
        return list(hotels)
    destination = destination.strip()
    return [hotel for hotel in hotels if matches_destination(hotel, destination)]
