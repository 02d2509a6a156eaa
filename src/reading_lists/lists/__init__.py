"""Reading list storage: named collections of saved articles and their entries."""
