from rectangling.dataframe import Dataframe
from rectangling.utils import tabulate

df = Dataframe.open_json("data/repos.json") \
  .widen("json") \
  .widen("owner", names_sep="_") \
  .lengthen("topics", keep_empty=True, indices_to="topic_idx") \
  .collect()

print(df.describe())
print(tabulate.tabulate(df.to_arrow()))
