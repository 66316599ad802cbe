"""PostgreSQL geometric types and their nullable forms: points, lines, segments, boxes, paths, polygons and circles."""