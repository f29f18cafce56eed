"""Handles interactive/command-line mode for the lambda DSL interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = ("lambdadsl :: untyped lambda calculus, normal-order reduction\n"
             "Type 'help' for an introduction, 'exit' to quit.")
    prompt = "> "
    secondary_prompt = ". "  # shown while parentheses are unclosed
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary lambda DSL statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}" if self._tmp_line else line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(line)
                self.sess.run()
            finally:
                self.sess.clear()

            while self.sess.results:
                print(self.sess.pop(), file=self.stdout)

    def do_env(self, arg):
        """Lists the bindings made by let statements so far. Given a λ-term, lists the names bound to it instead."""
        with self.sess.error_handler:
            if arg:
                for name in self.sess.lookup(arg):
                    print(name, file=self.stdout)
                return

            for name, term in self.sess.environment.snapshot().items():
                print(f"{name} = {term}", file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lambda DSL interpreter!\n\n"
              "Lambda calculus is a Turing-complete language created by Alonzo Church. This \n"
              "interpreter reduces untyped lambda terms to normal form. Abstractions are \n"
              "written '\\x.body' (or 'λx.body') and applications '(f a)', always in \n"
              "parentheses.\n\n"
              "Try it out by typing 'let id = \\x.x'. This will bind the lambda term 'λx.x' to \n"
              "the name 'id'. Next, try typing 'eval (id y)'. This will apply 'id' to 'y', \n"
              "giving 'y' as the result. Type 'env' to list bindings, or 'env \\a.a' to find \n"
              "the names bound to a term. Type 'exit' to quit.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
