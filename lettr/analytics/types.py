from enum import Enum


class BotType(str, Enum):
    KNOWN_BOT = "known_bot"
    SUSPECTED_BOT = "suspected_bot"
    NONE = "none"


class EventType(str, Enum):
    OPEN = "open"
    SCROLL = "scroll"
    CLICK = "click"
    REPLY = "reply"
    AGENT_QUERY = "agent_query"
    MCP_QUERY = "mcp_query"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
