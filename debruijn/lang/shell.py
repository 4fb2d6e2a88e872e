"""Handles interactive/command-line mode for debruijn. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lambda calculus De Bruijn shell."""
    intro = "De Bruijn converter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Parses an arbitrary λ-term and prints what debruijn knows about it."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}" if self._tmp_line else line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not line.strip():
                return

            self.sess.add(line, self.line_num)
            while self.sess.results:
                print(self.sess.pop(), file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to debruijn!\n\n"
              "Type a λ-term, such as 'λx.λy.x y' (or '\\x.\\y.x y'), and debruijn will print its \n"
              "free and bound variables, its syntax tree, its canonical form, and its nameless \n"
              "De Bruijn form, where every bound variable is replaced by the number of λs between \n"
              "it and its binder. A line with unclosed parentheses continues on the next line.",
              file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits debruijn."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits debruijn."""
        return True
