"""Plant flashcards, timed study cycles and quizzes in the terminal."""
