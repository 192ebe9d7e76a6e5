"""Socket.IO event names of the relay wire protocol."""

# Inbound (client -> server)
JOIN = "join"
UPDATE_STATE = "update-state"
UPDATE_APPEARANCE = "update-appearance"
UPDATE_NAME = "update-name"
CHAT_MESSAGE = "chat-message"

# Outbound (server -> client)
CURRENT_PLAYERS = "current-players"
PLAYER_JOINED = "player-joined"
PLAYER_UPDATE = "player-update"
PLAYER_APPEARANCE_UPDATE = "player-appearance-update"
PLAYER_NAME_UPDATE = "player-name-update"
PLAYER_LEFT = "player-left"

INBOUND_EVENTS = (JOIN, UPDATE_STATE, UPDATE_APPEARANCE, UPDATE_NAME, CHAT_MESSAGE)
