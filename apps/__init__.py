"""Django applications of the HotelesCO booking engine."""
