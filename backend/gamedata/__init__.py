# Gamedata module
# Submodules should be imported directly:
#   from gamedata.catalogue import GameDataCatalogue, load_catalogue
#   from gamedata.lookup import find_by_id_or_name, entity_id
