from geoalchemy2.shape import from_shape, to_shape
from shapely.geometry import Point

SRID = 4326


def convert_location(geom):
    if geom is None:
        return {"longitude": 0.0, "latitude": 0.0}
    point = to_shape(geom)
    return {
        "longitude": float(point.x),
        "latitude": float(point.y),
    }


def make_point(longitude: float, latitude: float):
    return from_shape(Point(longitude, latitude), srid=SRID)
