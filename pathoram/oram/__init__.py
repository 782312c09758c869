from pathoram.oram.tree_base_oram import TreeBaseOram
from pathoram.oram.path_oram import PathOram
