"""Per-chat conversation state (which session a chat is answering for)."""
