"""I/O layer — everything that touches git or the destination tree.

  git   bare mirror in the cache, scratch checkout of one commit
  tree  copy of the selected subtree, minus excluded paths
"""
