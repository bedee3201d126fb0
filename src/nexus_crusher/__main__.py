from nexus_crusher.cli import main

raise SystemExit(main())
