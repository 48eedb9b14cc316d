from rectangling.compute import FilterNode, FlattenNode, JSONDataSource, ShapeExpression

query = FlattenNode(
    FilterNode(
        ShapeExpression("json", "record"),
        JSONDataSource("data/repos.json"),
    ),
    names_sep="_",
)
for batch in query.batches():
    print("---")
    print(batch)
