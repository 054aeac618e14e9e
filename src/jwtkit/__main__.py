from jwtkit.cli import main

raise SystemExit(main())
